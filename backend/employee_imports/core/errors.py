"""Error kinds raised by the services and translated to HTTP by the routers."""

from __future__ import annotations

from typing import Any


class EmployeeImportsError(Exception):
    """Base exception for all employee import errors."""


class MalformedIdentifier(EmployeeImportsError):
    """A path identifier is not a base-10 integer."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Malformed identifier: {raw!r}")


class ValidationError(EmployeeImportsError):
    """Field-level validation failed.

    ``errors`` maps field names to a message; the ``employees`` key maps the
    index of each failing row (as a string) to that row's own field map.
    """

    def __init__(self, errors: dict[str, Any]) -> None:
        self.errors = errors
        super().__init__("Invalid data")


class NotFoundError(EmployeeImportsError):
    """The referenced import does not exist (or has nothing to export)."""


class DecodeError(EmployeeImportsError):
    """A spreadsheet blob could not be read."""


class StorageError(EmployeeImportsError):
    """A storage transaction failed and was rolled back."""

import datetime as dt
import re
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from employee_imports.db.base import MAX_ID

_NON_DIGITS = re.compile(r"\D")


def normalize_salaire(v: Any) -> Any:
    """Coerce spreadsheet salary cells to int.

    Strings keep only their digits ("45 000€" -> 45000); a string with no
    digits becomes 0 so that the positivity rule reports it.
    """
    if isinstance(v, bool):
        raise PydanticCustomError("salaire_not_integer", "Salaire doit être un entier")
    if isinstance(v, str):
        digits = _NON_DIGITS.sub("", v)
        return int(digits) if digits else 0
    if isinstance(v, float):
        if v != v or not v.is_integer():
            raise PydanticCustomError("salaire_not_integer", "Salaire doit être un entier")
        return int(v)
    return v


def _required(v: str, message: str) -> str:
    if not v.strip():
        raise PydanticCustomError("required", message)
    return v


class _In(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class EmployeeIn(_In):
    id: int | None = Field(default=None, ge=1, le=MAX_ID)
    nom: str
    email: str
    poste: str
    salaire: int
    # echoed back by GET responses; never written
    file_import_id: int | None = Field(default=None, exclude=True)

    @field_validator("nom")
    @classmethod
    def _nom(cls, v: str) -> str:
        return _required(v, "Nom requis")

    @field_validator("poste")
    @classmethod
    def _poste(cls, v: str) -> str:
        return _required(v, "Poste requis")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email_invalid", "Email invalide")
        return v

    @field_validator("salaire", mode="before")
    @classmethod
    def _salaire_in(cls, v: Any) -> Any:
        return normalize_salaire(v)

    @field_validator("salaire")
    @classmethod
    def _salaire_positive(cls, v: int) -> int:
        if v <= 0:
            raise PydanticCustomError("salaire_not_positive", "Salaire doit être supérieur à zéro")
        return v


class FileImportIn(_In):
    id: int | None = None
    file_name: str
    imported_at: dt.datetime | None = None
    employees: list[EmployeeIn] = Field(default_factory=list)

    @field_validator("file_name")
    @classmethod
    def _file_name(cls, v: str) -> str:
        return _required(v, "Nom de fichier requis")

    @field_validator("imported_at", mode="before")
    @classmethod
    def _imported_at(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            raise PydanticCustomError("required", "Date d'import requise")
        return v


class FileImportUpdate(FileImportIn):
    imported_at: dt.datetime


class _Out(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class EmployeeOut(_Out):
    id: int
    nom: str
    email: str
    poste: str
    salaire: int
    file_import_id: int


class FileImportOut(_Out):
    id: int
    file_name: str
    imported_at: dt.datetime
    employees: list[EmployeeOut]


class MessageOut(BaseModel):
    message: str

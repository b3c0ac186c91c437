"""Record validation.

Validation never stops at the first failure: every employee row is checked
and the result carries one field map per failing row index, so a caller can
show all problems at once.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Iterable

import pydantic

from employee_imports.schemas.file_imports import EmployeeIn, FileImportIn, FileImportUpdate

FieldErrors = dict[str, Any]

_FIELD_KEYS = {
    "file_name": "fileName",
    "imported_at": "importedAt",
    "file_import_id": "fileImportId",
}

_REQUIRED = {
    "fileName": "Nom de fichier requis",
    "importedAt": "Date d'import requise",
    "nom": "Nom requis",
    "email": "Email invalide",
    "poste": "Poste requis",
    "salaire": "Salaire requis",
}


def _key(part: Any) -> Any:
    if isinstance(part, str):
        return _FIELD_KEYS.get(part, part)
    return part


def _message(err: dict, field: str | None) -> str:
    if err["type"] == "missing" and field in _REQUIRED:
        return _REQUIRED[field]
    if err["type"] == "extra_forbidden":
        return "Champ inconnu"
    if field == "salaire" and err["type"].startswith("int_"):
        return "Salaire doit être un entier"
    return err["msg"]


def collect_errors(exc: pydantic.ValidationError) -> FieldErrors:
    """Fold pydantic errors into ``{field: msg, "employees": {idx: {field: msg}}}``."""
    out: FieldErrors = {}
    for err in exc.errors():
        loc = [_key(p) for p in err["loc"]]
        if not loc:
            out.setdefault("body", "Données invalides")
            continue
        if loc[0] == "employees" and len(loc) >= 2 and isinstance(loc[1], int):
            rows = out.setdefault("employees", {})
            if not isinstance(rows, dict):
                continue
            field = str(loc[2]) if len(loc) > 2 else "row"
            rows.setdefault(str(loc[1]), {}).setdefault(field, _message(err, field))
            continue
        field = str(loc[0])
        out.setdefault(field, _message(err, field))
    return out


def _employee_errors(exc: pydantic.ValidationError) -> FieldErrors:
    out: FieldErrors = {}
    for err in exc.errors():
        field = str(_key(err["loc"][0])) if err["loc"] else "row"
        out.setdefault(field, _message(err, field))
    return out


def validate_employee(raw: Any) -> tuple[EmployeeIn | None, FieldErrors]:
    try:
        return EmployeeIn.model_validate(raw), {}
    except pydantic.ValidationError as e:
        return None, _employee_errors(e)


def _raw_id(row: Any) -> int | None:
    v = row.get("id") if isinstance(row, dict) else None
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().isascii() and v.strip().isdigit():
        return int(v)
    return None


def _merge_rows(errors: FieldErrors, row_errors: FieldErrors) -> FieldErrors:
    if not row_errors:
        return errors
    rows = errors.setdefault("employees", {})
    if isinstance(rows, dict):
        for idx, fields in row_errors.items():
            row = rows.setdefault(idx, {})
            for field, msg in fields.items():
                row.setdefault(field, msg)
    return errors


def validate_file_import(raw: Any, *, update: bool = False) -> tuple[FileImportIn | None, FieldErrors]:
    model = FileImportUpdate if update else FileImportIn
    try:
        data = model.model_validate(raw)
    except pydantic.ValidationError as e:
        # id clashes are reported next to field errors, from the raw rows
        employees = raw.get("employees") if isinstance(raw, dict) else None
        ids = [_raw_id(r) for r in employees] if isinstance(employees, list) else []
        return None, _merge_rows(collect_errors(e), check_ids(ids))

    row_errors = check_employee_ids(data.employees)
    if row_errors:
        return None, {"employees": row_errors}
    return data, {}


def validate_rows(rows: Iterable[Any]) -> tuple[list[EmployeeIn], FieldErrors]:
    """Validate loose rows one by one; errors are keyed by row index."""
    employees: list[EmployeeIn] = []
    errors: FieldErrors = {}
    for i, raw in enumerate(rows):
        emp, errs = validate_employee(raw)
        if errs:
            errors[str(i)] = errs
        else:
            employees.append(emp)
    return employees, errors


def check_ids(ids: list[int | None], known_ids: set[int] | None = None) -> FieldErrors:
    """Flag duplicated ids, and ids outside ``known_ids`` when it is given."""
    counts = Counter(i for i in ids if i is not None)
    errors: FieldErrors = {}
    for idx, emp_id in enumerate(ids):
        if emp_id is None:
            continue
        if counts[emp_id] > 1:
            errors[str(idx)] = {"id": "Identifiant en double"}
        elif known_ids is not None and emp_id not in known_ids:
            errors[str(idx)] = {"id": "Employé inconnu pour cette importation"}
    return errors


def check_employee_ids(employees: list[EmployeeIn], known_ids: set[int] | None = None) -> FieldErrors:
    return check_ids([e.id for e in employees], known_ids)

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.orm import Session

from employee_imports.core.errors import NotFoundError, ValidationError
from employee_imports.core.logging import logger
from employee_imports.crud.file_imports import (
    create_file_import,
    delete_employees_by_file_import,
    delete_file_import,
    get_file_import,
    list_employees,
    list_file_imports,
)
from employee_imports.db.models.file_import import FileImport
from employee_imports.db.session import transaction
from employee_imports.services.reconcile import reconcile
from employee_imports.services.tabular import decode_rows, encode_rows
from employee_imports.services.validation import validate_file_import, validate_rows

# Export column order is part of the output contract.
EXPORT_COLUMNS = (("Nom", "nom"), ("Email", "email"), ("Salaire", "salaire"), ("Poste", "poste"))

UPLOAD_FIELDS = ("nom", "email", "poste", "salaire")


def list_imports(db: Session) -> list[FileImport]:
    return list_file_imports(db)


def get_import(db: Session, file_import_id: int) -> FileImport:
    fi = get_file_import(db, file_import_id)
    if fi is None:
        raise NotFoundError(file_import_id)
    return fi


def create_import(db: Session, raw: Any) -> FileImport:
    data, errors = validate_file_import(raw)
    if errors:
        raise ValidationError(errors)

    with transaction(db, "create_import"):
        fi = create_file_import(db, data.file_name, data.imported_at, data.employees)
        file_import_id = fi.id

    logger.info("file_import_created", file_import_id=file_import_id, employees=len(data.employees))
    db.expire_all()
    return get_file_import(db, file_import_id)


def _upload_row(row: Mapping[str, Any]) -> dict[str, Any]:
    by_key = {str(k).strip().lower(): v for k, v in row.items()}
    out: dict[str, Any] = {}
    for f in UPLOAD_FIELDS:
        v = by_key.get(f, "")
        if f != "salaire":
            v = "" if v is None else str(v).strip()
        out[f] = v
    return out


def import_spreadsheet(db: Session, file_name: str, blob: bytes) -> FileImport:
    """Decode an uploaded workbook and store it as a new import.

    Raises DecodeError for unreadable files and ValidationError listing
    every invalid row (by index) otherwise.
    """
    rows = decode_rows(blob)
    employees, row_errors = validate_rows(_upload_row(r) for r in rows)
    if row_errors:
        raise ValidationError({"employees": row_errors})

    with transaction(db, "import_spreadsheet"):
        fi = create_file_import(db, file_name, None, employees)
        file_import_id = fi.id

    logger.info("file_import_uploaded", file_import_id=file_import_id, file_name=file_name, employees=len(employees))
    db.expire_all()
    return get_file_import(db, file_import_id)


def update_import(db: Session, file_import_id: int, raw: Any) -> FileImport:
    data, errors = validate_file_import(raw, update=True)
    if errors:
        raise ValidationError(errors)
    return reconcile(db, file_import_id, data)


def delete_import(db: Session, file_import_id: int) -> None:
    with transaction(db, "delete_import"):
        if get_file_import(db, file_import_id) is None:
            raise NotFoundError(file_import_id)
        delete_employees_by_file_import(db, file_import_id)
        delete_file_import(db, file_import_id)
    db.expire_all()
    logger.info("file_import_deleted", file_import_id=file_import_id)


def export_import(db: Session, file_import_id: int, sheet_title: str) -> bytes:
    """Encode the import's employees as xlsx; an import with no employees has nothing to export."""
    employees = list_employees(db, file_import_id)
    if not employees:
        raise NotFoundError(file_import_id)
    blob = encode_rows(
        ({title: getattr(e, attr) for title, attr in EXPORT_COLUMNS} for e in employees),
        sheet_title,
    )
    logger.info("file_import_exported", file_import_id=file_import_id, employees=len(employees))
    return blob

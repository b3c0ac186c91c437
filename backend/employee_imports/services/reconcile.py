"""Converge an import's stored employees onto a proposed collection.

This is set reconciliation keyed on employee id, not a row diff:

* stored ids missing from the proposed ids are deleted,
* proposed rows carrying an id overwrite that stored row,
* proposed rows without an id are inserted, in input order.

Rows whose fields already match storage are left alone, so submitting the
same state twice issues no writes for employees on the second call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from sqlalchemy.orm import Session

from employee_imports.core.errors import NotFoundError, ValidationError
from employee_imports.core.logging import logger
from employee_imports.crud.file_imports import (
    create_employees,
    delete_employees_by_ids,
    get_file_import,
    update_employee_fields,
    update_file_import_fields,
)
from employee_imports.db.models.file_import import FileImport
from employee_imports.db.session import transaction
from employee_imports.schemas.file_imports import EmployeeIn, FileImportIn
from employee_imports.services.validation import check_employee_ids

MUTABLE_FIELDS = ("nom", "email", "poste", "salaire")


class EmployeeLike(Protocol):
    id: int | None
    nom: str
    email: str
    poste: str
    salaire: int


@dataclass
class ReconciliationPlan:
    ids_to_delete: set[int] = field(default_factory=set)
    to_update: list[EmployeeIn] = field(default_factory=list)
    to_create: list[EmployeeIn] = field(default_factory=list)
    unchanged: int = 0

    @property
    def is_noop(self) -> bool:
        return not (self.ids_to_delete or self.to_update or self.to_create)


def _same(stored: EmployeeLike, proposed: EmployeeLike) -> bool:
    return all(getattr(stored, f) == getattr(proposed, f) for f in MUTABLE_FIELDS)


def plan_reconciliation(existing: Iterable[EmployeeLike], proposed: Iterable[EmployeeIn]) -> ReconciliationPlan:
    stored = {e.id: e for e in existing}
    candidates = [e for e in proposed if e.id is not None]
    plan = ReconciliationPlan(
        ids_to_delete=set(stored) - {e.id for e in candidates},
        to_create=[e for e in proposed if e.id is None],
    )
    for emp in candidates:
        current = stored.get(emp.id)
        if current is not None and _same(current, emp):
            plan.unchanged += 1
        else:
            plan.to_update.append(emp)
    return plan


def apply_plan(db: Session, file_import_id: int, plan: ReconciliationPlan) -> None:
    delete_employees_by_ids(db, plan.ids_to_delete)
    for emp in plan.to_update:
        update_employee_fields(db, emp.id, emp.nom, emp.email, emp.poste, int(emp.salaire))
    create_employees(db, file_import_id, plan.to_create)


def reconcile(db: Session, file_import_id: int, data: FileImportIn) -> FileImport:
    """Apply ``data`` to the stored import in one transaction and return the reloaded import.

    Raises NotFoundError if the import is missing and ValidationError when a
    proposed id is duplicated or belongs to another import; nothing is
    written in either case.
    """
    with transaction(db, "reconcile"):
        existing = get_file_import(db, file_import_id)
        if existing is None:
            raise NotFoundError(file_import_id)

        row_errors = check_employee_ids(data.employees, known_ids={e.id for e in existing.employees})
        if row_errors:
            raise ValidationError({"employees": row_errors})

        plan = plan_reconciliation(existing.employees, data.employees)
        apply_plan(db, file_import_id, plan)
        imported_at = data.imported_at if data.imported_at is not None else existing.imported_at
        update_file_import_fields(db, file_import_id, data.file_name, imported_at)

    logger.info(
        "file_import_reconciled",
        file_import_id=file_import_id,
        deleted=len(plan.ids_to_delete),
        updated=len(plan.to_update),
        created=len(plan.to_create),
        unchanged=plan.unchanged,
    )
    db.expire_all()
    return get_file_import(db, file_import_id)

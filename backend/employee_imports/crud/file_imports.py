import datetime as dt
from typing import Iterable

from sqlalchemy.orm import Session, selectinload

from employee_imports.db.models.file_import import FileImport
from employee_imports.db.models.employee import Employee
from employee_imports.schemas.file_imports import EmployeeIn

# Nothing here commits: callers compose these inside one transaction().

def get_file_import(db: Session, file_import_id: int) -> FileImport | None:
    return (
        db.query(FileImport)
        .options(selectinload(FileImport.employees))
        .filter(FileImport.id == file_import_id)
        .one_or_none()
    )

def list_file_imports(db: Session):
    return (
        db.query(FileImport)
        .options(selectinload(FileImport.employees))
        .order_by(FileImport.imported_at.desc(), FileImport.id.desc())
        .all()
    )

def list_employees(db: Session, file_import_id: int):
    return db.query(Employee).filter(Employee.file_import_id == file_import_id).order_by(Employee.id).all()

def create_file_import(
    db: Session,
    file_name: str,
    imported_at: dt.datetime | None,
    employees: Iterable[EmployeeIn],
) -> FileImport:
    fi = FileImport(file_name=file_name)
    if imported_at is not None:
        fi.imported_at = imported_at
    db.add(fi)
    db.flush()
    create_employees(db, fi.id, employees)
    return fi

def create_employees(db: Session, file_import_id: int, employees: Iterable[EmployeeIn]) -> int:
    n = 0
    for emp in employees:
        db.add(Employee(
            file_import_id=file_import_id,
            nom=emp.nom,
            email=emp.email,
            poste=emp.poste,
            salaire=int(emp.salaire),
        ))
        n += 1
    db.flush()
    return n

def update_employee_fields(db: Session, employee_id: int, nom: str, email: str, poste: str, salaire) -> None:
    db.query(Employee).filter(Employee.id == employee_id).update(
        {
            Employee.nom: nom,
            Employee.email: email,
            Employee.poste: poste,
            Employee.salaire: int(salaire),
        },
        synchronize_session=False,
    )

def delete_employees_by_ids(db: Session, ids: set[int]) -> None:
    if not ids:
        return
    db.query(Employee).filter(Employee.id.in_(ids)).delete(synchronize_session="fetch")

def update_file_import_fields(db: Session, file_import_id: int, file_name: str, imported_at: dt.datetime) -> None:
    db.query(FileImport).filter(FileImport.id == file_import_id).update(
        {FileImport.file_name: file_name, FileImport.imported_at: imported_at},
        synchronize_session=False,
    )

def delete_employees_by_file_import(db: Session, file_import_id: int) -> None:
    db.query(Employee).filter(Employee.file_import_id == file_import_id).delete(synchronize_session="fetch")

def delete_file_import(db: Session, file_import_id: int) -> None:
    db.query(FileImport).filter(FileImport.id == file_import_id).delete(synchronize_session="fetch")

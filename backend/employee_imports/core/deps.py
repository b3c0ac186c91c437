from fastapi import HTTPException

from employee_imports.core.errors import MalformedIdentifier
from employee_imports.db.base import MAX_ID
from employee_imports.db.session import SessionLocal

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def parse_id(raw: str) -> int:
    s = raw.strip()
    if not (s.isascii() and s.isdigit()):
        raise MalformedIdentifier(raw)
    n = int(s)
    if n > MAX_ID:
        raise MalformedIdentifier(raw)
    return n

def get_file_import_id(file_import_id: str) -> int:
    try:
        return parse_id(file_import_id)
    except MalformedIdentifier:
        raise HTTPException(status_code=400, detail="ID invalide")

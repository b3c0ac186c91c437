from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from employee_imports.core.config import settings
from employee_imports.core.errors import StorageError
from employee_imports.core.logging import logger

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def transaction(db: Session, op: str) -> Iterator[Session]:
    """Run a unit of work: commit if the block completes, roll back otherwise."""
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("storage_failed", op=op, error=str(e))
        raise StorageError(op) from e
    except Exception:
        db.rollback()
        raise

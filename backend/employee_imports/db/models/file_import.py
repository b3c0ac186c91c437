import datetime as dt
from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from employee_imports.db.base import Base
from employee_imports.db.models._mixins import TimestampMixin

class FileImport(Base, TimestampMixin):
    __tablename__ = "file_import"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    file_name: Mapped[str] = mapped_column(String(512))
    imported_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)

    employees = relationship(
        "Employee",
        back_populates="file_import",
        order_by="Employee.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

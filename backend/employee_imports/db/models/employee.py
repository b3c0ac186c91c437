from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from employee_imports.db.base import Base
from employee_imports.db.models._mixins import TimestampMixin

class Employee(Base, TimestampMixin):
    __tablename__ = "employee"
    # never hand a deleted id to a new row
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    file_import_id: Mapped[int] = mapped_column(ForeignKey("file_import.id", ondelete="CASCADE"), index=True)

    nom: Mapped[str] = mapped_column(String(256))
    email: Mapped[str] = mapped_column(String(320))
    poste: Mapped[str] = mapped_column(String(256))
    salaire: Mapped[int] = mapped_column(Integer)

    file_import = relationship("FileImport", back_populates="employees")

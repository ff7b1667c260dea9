from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.models.audit import AuditMixin, next_version

class Todo(AuditMixin, Base):
    __tablename__ = "todos"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(50))
    description: Mapped[str | None] = mapped_column(String(150), nullable=True)
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # owner; a plain reference, deleting the user leaves the todo in place
    created_by_id: Mapped[int] = mapped_column(Integer, index=True)

    __mapper_args__ = {"version_id_col": version, "version_id_generator": next_version}

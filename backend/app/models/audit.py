from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


def next_version(current: int | None) -> int:
    return 0 if current is None else current + 1


class AuditMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())
    created_by_id: Mapped[int] = mapped_column(Integer, default=0)
    updated_by_id: Mapped[int] = mapped_column(Integer, default=0)

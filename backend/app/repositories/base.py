from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.base import Base

T = TypeVar("T", bound=Base)


class Repository(Generic[T]):
    """Narrow persistence interface the services depend on.

    One instance per request, bound to that request's session. Each write
    commits on its own; the version guard on UPDATE is what serializes
    concurrent writers to the same row.
    """

    model: type[T]

    def __init__(self, s: Session):
        self.s = s

    def find_by_id(self, id: int) -> T | None:
        return self.s.get(self.model, id)

    def find_by(self, **fields) -> T | None:
        q = select(self.model).filter_by(**fields).limit(1)
        return self.s.execute(q).scalars().first()

    def list_where(self, *criteria) -> list[T]:
        q = select(self.model).order_by(self.model.id.asc())
        if criteria:
            q = q.where(*criteria)
        return list(self.s.execute(q).scalars().all())

    def save(self, entity: T) -> T:
        self.s.add(entity)
        try:
            self.s.commit()
        except Exception:
            self.s.rollback()
            raise
        self.s.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        self.s.delete(entity)
        try:
            self.s.commit()
        except Exception:
            self.s.rollback()
            raise

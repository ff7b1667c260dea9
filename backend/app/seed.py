import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.db.session import SessionLocal
from app.models.todo import Todo
from app.models.user import User

log = logging.getLogger(__name__)

# id, username, is_admin; the password equals the username
SEED_USERS = [
    (1, "admin", True),
    (2, "user", False),
]

# id, title, description, is_closed, owner id
SEED_TODOS = [
    (1, "OpenAdmin", "Example of an open admin todo", False, 1),
    (2, "ClosedAdmin", "Example of an closed admin todo", True, 1),
    (3, "OpenUser", "Example of an open user todo", False, 2),
    (4, "ClosedUser", "Example of a closed user todo", True, 2),
]


def seed(s: Session) -> None:
    """Insert the baseline rows, skipping any id that already exists."""
    for id, username, is_admin in SEED_USERS:
        if s.get(User, id) is not None:
            continue
        s.add(
            User(
                id=id,
                username=username.lower(),
                email=f"{username}@local.ch".lower(),
                password_hash=hash_password(username),
                is_admin=is_admin,
                created_by_id=0,
                updated_by_id=0,
            )
        )
        log.debug("seeding user id=%s username=%s", id, username)
    s.commit()

    for id, title, description, is_closed, owner_id in SEED_TODOS:
        if s.get(Todo, id) is not None:
            continue
        s.add(
            Todo(
                id=id,
                title=title,
                description=description,
                is_closed=is_closed,
                created_by_id=owner_id,
                updated_by_id=owner_id,
            )
        )
        log.debug("seeding todo id=%s title=%s", id, title)
    s.commit()

    _sync_sequences(s)


def _sync_sequences(s: Session) -> None:
    # explicit ids leave postgres serials behind the seeded rows
    if s.get_bind().dialect.name != "postgresql":
        return
    for table in ("users", "todos"):
        s.execute(
            text(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"COALESCE((SELECT MAX(id) FROM {table}), 1))"
            )
        )
    s.commit()


def main():
    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()

if __name__ == "__main__":
    main()

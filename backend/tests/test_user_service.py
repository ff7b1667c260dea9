import pytest
from unittest.mock import patch

from app.core.context import RequestContext
from app.core.errors import Conflict, Forbidden, NotFound, Unauthorized
from app.core.security import decode_token
from app.models.user import User
from app.schemas.user import UserCreate, UserReplace
from app.services import users as user_service


def _create_body(username="newuser1", password="user12A$"):
    return UserCreate(username=username, email=f"{username}@example.com", password=password)


def test_sign_in_issues_token_for_valid_credentials(users, user_ctx):
    out = user_service.sign_in(user_ctx, users, "admin", "admin")
    payload = decode_token(out.access_token)
    assert payload.sub == 1
    assert payload.username == "admin"


def test_sign_in_unknown_username_is_not_found(users, user_ctx):
    with pytest.raises(NotFound):
        user_service.sign_in(user_ctx, users, "nobody123", "whatever")


def test_sign_in_wrong_password_is_unauthorized(users, user_ctx):
    with patch("app.services.users.create_access_token") as sign:
        with pytest.raises(Unauthorized):
            user_service.sign_in(user_ctx, users, "admin", "wrong")
        sign.assert_not_called()


def test_create_hashes_password_and_stamps_actor(users, admin_ctx):
    out = user_service.create_user(admin_ctx, users, _create_body())
    assert out.username == "newuser1"
    assert out.is_admin is False
    assert out.version == 0
    assert out.created_by_id == admin_ctx.caller_id
    assert out.updated_by_id == admin_ctx.caller_id
    assert "password_hash" not in out.model_dump()

    stored = users.find_by_username("newuser1")
    assert stored.password_hash != "user12A$"
    assert stored.password_hash.startswith("$argon2id$")


def test_register_uses_system_actor(users):
    out = user_service.create_user(RequestContext.system(5), users, _create_body("register1"))
    assert out.created_by_id == 0


def test_create_duplicate_username_conflicts_without_hashing(users, admin_ctx):
    user_service.create_user(admin_ctx, users, _create_body("dupeuser"))
    with patch("app.services.users.hash_password") as hasher:
        with pytest.raises(Conflict) as exc:
            user_service.create_user(admin_ctx, users, _create_body("dupeuser"))
        hasher.assert_not_called()
    assert exc.value.detail == "Username dupeuser already exists"
    assert len([u for u in users.list_where() if u.username == "dupeuser"]) == 1


def test_list_users_is_admin_only(users, admin_ctx, user_ctx):
    assert [u.username for u in user_service.list_users(admin_ctx, users)] == ["admin", "user"]
    with pytest.raises(Forbidden):
        user_service.list_users(user_ctx, users)


def test_get_user_self_or_admin(users, admin_ctx, user_ctx):
    assert user_service.get_user(user_ctx, users, 2).username == "user"
    assert user_service.get_user(admin_ctx, users, 2).username == "user"
    with pytest.raises(Forbidden):
        user_service.get_user(user_ctx, users, 1)
    with pytest.raises(NotFound):
        user_service.get_user(admin_ctx, users, 999)


def test_profile_returns_caller(users, user_ctx):
    assert user_service.profile(user_ctx, users).id == 2


def test_update_sets_admin_flag_and_bumps_version(users, admin_ctx):
    before = user_service.get_user(admin_ctx, users, 2)
    out = user_service.update_user(admin_ctx, users, 2, True)
    assert out.is_admin is True
    assert out.updated_by_id == admin_ctx.caller_id
    assert out.version == before.version + 1


def test_update_leaves_email_and_username_alone(users, admin_ctx):
    before = user_service.get_user(admin_ctx, users, 2)
    out = user_service.update_user(admin_ctx, users, 2, False)
    assert out.is_admin is False
    assert (out.username, out.email) == (before.username, before.email)


def test_update_requires_admin_and_existing_user(users, admin_ctx, user_ctx):
    with pytest.raises(Forbidden):
        user_service.update_user(user_ctx, users, 2, True)
    with pytest.raises(NotFound):
        user_service.update_user(admin_ctx, users, 999, True)


def test_replace_checks_version(users, admin_ctx):
    current = user_service.get_user(admin_ctx, users, 2)
    body = UserReplace(version=current.version, username="renamed1", email="renamed@example.com", is_admin=False)
    out = user_service.replace_user(admin_ctx, users, 2, body)
    assert out.username == "renamed1"
    assert out.version == current.version + 1

    with pytest.raises(Conflict):
        user_service.replace_user(admin_ctx, users, 2, body)
    assert users.find_by_id(2).username == "renamed1"


def test_replace_rejects_taken_username(users, admin_ctx, make_user):
    make_user("takenname")
    current = user_service.get_user(admin_ctx, users, 2)
    body = UserReplace(version=current.version, username="takenname", email="x@example.com")
    with pytest.raises(Conflict):
        user_service.replace_user(admin_ctx, users, 2, body)


def test_remove_returns_view_and_deletes(users, admin_ctx, user_ctx, make_user):
    victim_id = make_user("leavinguser").id
    with pytest.raises(Forbidden):
        user_service.remove_user(user_ctx, users, victim_id)

    out = user_service.remove_user(admin_ctx, users, victim_id)
    assert out.username == "leavinguser"
    assert users.find_by_id(victim_id) is None
    with pytest.raises(NotFound):
        user_service.remove_user(admin_ctx, users, victim_id)


def test_create_loses_username_race_with_conflict(users, user_ctx, make_user, session):
    make_user("racername")
    # the pre-check misses a row a concurrent request has just inserted
    with patch.object(type(users), "find_by_username", return_value=None):
        with pytest.raises(Conflict):
            user_service.create_user(user_ctx, users, _create_body("racername"))
    assert session.query(User).filter_by(username="racername").count() == 1


def test_replace_loses_username_race_with_conflict(users, admin_ctx, make_user, session):
    make_user("racername")
    current = user_service.get_user(admin_ctx, users, 2)
    body = UserReplace(version=current.version, username="racername", email="user@local.ch")
    with patch.object(type(users), "find_by_username", return_value=None):
        with pytest.raises(Conflict):
            user_service.replace_user(admin_ctx, users, 2, body)
    assert session.query(User).filter_by(username="racername").count() == 1
    assert users.find_by_id(2).username == "user"

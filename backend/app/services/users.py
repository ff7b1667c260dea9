from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import flag_modified

from app.core.context import RequestContext
from app.core.errors import Conflict, Forbidden, NotFound, Unauthorized
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.auth import TokenOut
from app.schemas.user import UserCreate, UserOut, UserReplace


def to_user_out(u: User) -> UserOut:
    # password_hash never leaves this module
    return UserOut.model_validate(u)


def _require_admin(ctx: RequestContext) -> None:
    if not ctx.is_admin:
        ctx.log(__name__).debug("caller %s is not an admin", ctx.caller_id)
        raise Forbidden()


def _get_or_404(ctx: RequestContext, users: UserRepository, user_id: int) -> User:
    u = users.find_by_id(user_id)
    if u is None:
        ctx.log(__name__).debug("user id=%s not found", user_id)
        raise NotFound(f"User {user_id} not found")
    return u


def sign_in(ctx: RequestContext, users: UserRepository, username: str, password: str) -> TokenOut:
    log = ctx.log(__name__)
    u = users.find_by_username(username)
    if u is None:
        log.debug("sign-in for unknown username=%s", username)
        raise NotFound(f"User {username} not found")
    if not verify_password(password, u.password_hash):
        log.info("sign-in rejected for username=%s", username)
        raise Unauthorized()
    return TokenOut(access_token=create_access_token(sub=u.id, username=u.username))


def create_user(ctx: RequestContext, users: UserRepository, body: UserCreate) -> UserOut:
    log = ctx.log(__name__)
    if users.find_by_username(body.username) is not None:
        log.warning("username already exists: %s", body.username)
        raise Conflict(f"Username {body.username} already exists")

    u = User(
        username=body.username,
        email=str(body.email),
        password_hash=hash_password(body.password),
        is_admin=False,
        created_by_id=ctx.caller_id,
        updated_by_id=ctx.caller_id,
    )
    try:
        users.save(u)
    except IntegrityError:
        # lost a race against a concurrent create with the same username
        log.warning("username already exists: %s", body.username)
        raise Conflict(f"Username {body.username} already exists")
    log.debug("created user id=%s", u.id)
    return to_user_out(u)


def list_users(ctx: RequestContext, users: UserRepository) -> list[UserOut]:
    _require_admin(ctx)
    return [to_user_out(u) for u in users.list_where()]


def get_user(ctx: RequestContext, users: UserRepository, user_id: int) -> UserOut:
    u = _get_or_404(ctx, users, user_id)
    if not ctx.is_admin and ctx.caller_id != user_id:
        raise Forbidden()
    return to_user_out(u)


def profile(ctx: RequestContext, users: UserRepository) -> UserOut:
    return to_user_out(_get_or_404(ctx, users, ctx.caller_id))


def update_user(ctx: RequestContext, users: UserRepository, user_id: int, is_admin: bool) -> UserOut:
    """Admin flag change by an admin, last write wins. Nothing else is merged."""
    _require_admin(ctx)
    u = _get_or_404(ctx, users, user_id)
    u.is_admin = bool(is_admin)
    u.updated_by_id = ctx.caller_id
    users.save(u)
    return to_user_out(u)


def replace_user(ctx: RequestContext, users: UserRepository, user_id: int, body: UserReplace) -> UserOut:
    log = ctx.log(__name__)
    _require_admin(ctx)
    u = _get_or_404(ctx, users, user_id)
    if u.version != body.version:
        log.debug("user id=%s version mismatch. Expected %s got %s", user_id, u.version, body.version)
        raise Conflict(f"User {user_id} version mismatch, expected {u.version} got {body.version}")

    if body.username != u.username:
        other = users.find_by_username(body.username)
        if other is not None and other.id != u.id:
            raise Conflict(f"Username {body.username} already exists")

    u.username = body.username
    u.email = str(body.email)
    u.is_admin = body.is_admin
    u.updated_by_id = ctx.caller_id
    flag_modified(u, "updated_by_id")
    try:
        users.save(u)
    except IntegrityError:
        raise Conflict(f"Username {body.username} already exists")
    return to_user_out(u)


def remove_user(ctx: RequestContext, users: UserRepository, user_id: int) -> UserOut:
    _require_admin(ctx)
    u = _get_or_404(ctx, users, user_id)
    out = to_user_out(u)
    users.delete(u)
    ctx.log(__name__).debug("deleted user id=%s", user_id)
    return out

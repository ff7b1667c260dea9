import logging
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from app.core.config import settings, require_jwt_secret
from app.core.errors import Unauthorized
from app.schemas.auth import TokenPayload

log = logging.getLogger(__name__)

# argon2id, ~19 MB memory, 2 passes, single lane
pwd = CryptContext(
    schemes=["argon2"],
    argon2__type="id",
    argon2__memory_cost=19456,
    argon2__rounds=2,
    argon2__parallelism=1,
)

def hash_password(p: str) -> str:
    if p is None:
        raise ValueError("password is required")
    return pwd.hash(str(p))

def verify_password(p: str, hashed: str) -> bool:
    if p is None or not hashed:
        return False
    try:
        return pwd.verify(str(p), hashed)
    except Exception:
        # corrupt or foreign hash format; never surface why
        log.warning("password verification failed on an unreadable hash")
        return False

def create_access_token(sub: int, username: str, expires_min: int | None = None) -> str:
    secret = require_jwt_secret(settings)
    now = datetime.now(timezone.utc)
    minutes = settings.jwt_expires_min if expires_min is None else expires_min
    payload = {
        "sub": str(sub),
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_alg)

def decode_token(token: str) -> TokenPayload:
    secret = require_jwt_secret(settings)
    try:
        raw = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_alg],
            options={"require": ["exp", "sub"]},
        )
        return TokenPayload(sub=int(raw["sub"]), username=raw.get("username", ""))
    except (jwt.PyJWTError, ValueError, KeyError) as e:
        log.warning("invalid/expired token (%s)", type(e).__name__)
        raise Unauthorized("Invalid or expired token")

import re
from datetime import datetime

from pydantic import EmailStr, field_validator

from app.schemas.base import ApiModel

USERNAME_MIN = 8
USERNAME_MAX = 20
PASSWORD_MIN = 8
PASSWORD_SPECIALS = "@$!%*?&"


def check_username(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("username is required")
    if len(v) < USERNAME_MIN or len(v) > USERNAME_MAX:
        raise ValueError(f"username must be {USERNAME_MIN}-{USERNAME_MAX} characters")
    if v != v.lower():
        raise ValueError("username must be lowercase")
    return v


def check_password(v: str) -> str:
    v = str(v or "")
    if not v:
        raise ValueError("password is required")
    if len(v) < PASSWORD_MIN:
        raise ValueError(f"password must be at least {PASSWORD_MIN} characters")
    if not re.search(r"[a-z]", v):
        raise ValueError("Password must contain a lowercase letter")
    if not re.search(r"[A-Z]", v):
        raise ValueError("Password must contain an uppercase letter")
    if not re.search(r"\d", v):
        raise ValueError("Password must contain a number")
    if not re.search(r"[@$!%*?&]", v):
        raise ValueError(f"Password must contain a special character [{PASSWORD_SPECIALS}]")
    return v


class UserCreate(ApiModel):
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def username_rule(cls, v: str):
        return check_username(v)

    @field_validator("password")
    @classmethod
    def password_rule(cls, v: str):
        return check_password(v)


class UserAdminUpdate(ApiModel):
    is_admin: bool


class UserReplace(ApiModel):
    id: int | None = None
    version: int
    username: str
    email: EmailStr
    is_admin: bool = False

    @field_validator("username")
    @classmethod
    def username_rule(cls, v: str):
        return check_username(v)


class UserOut(ApiModel):
    id: int
    username: str
    email: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime
    version: int
    created_by_id: int
    updated_by_id: int

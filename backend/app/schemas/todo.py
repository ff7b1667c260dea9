from datetime import datetime

from pydantic import field_validator

from app.schemas.base import ApiModel

TITLE_MIN = 8
TITLE_MAX = 50
DESCRIPTION_MAX = 150


def check_title(v: str) -> str:
    v = str(v or "")
    if not v.strip():
        raise ValueError("title is required")
    if len(v) < TITLE_MIN or len(v) > TITLE_MAX:
        raise ValueError(f"title must be {TITLE_MIN}-{TITLE_MAX} characters")
    return v


def check_description(v: str | None) -> str | None:
    if v is None:
        return None
    if len(v) > DESCRIPTION_MAX:
        raise ValueError(f"description must be at most {DESCRIPTION_MAX} characters")
    return v


class TodoCreate(ApiModel):
    title: str
    description: str | None = None

    @field_validator("title")
    @classmethod
    def title_rule(cls, v: str):
        return check_title(v)

    @field_validator("description")
    @classmethod
    def description_rule(cls, v: str | None):
        return check_description(v)


class TodoUpdate(ApiModel):
    title: str | None = None
    description: str | None = None
    is_closed: bool | None = None

    @field_validator("title")
    @classmethod
    def title_rule(cls, v: str | None):
        return None if v is None else check_title(v)

    @field_validator("description")
    @classmethod
    def description_rule(cls, v: str | None):
        return check_description(v)


class TodoAdminUpdate(ApiModel):
    is_closed: bool


class TodoReplace(ApiModel):
    id: int | None = None
    version: int
    title: str | None = None
    description: str | None = None
    is_closed: bool | None = None

    @field_validator("title")
    @classmethod
    def title_rule(cls, v: str | None):
        return None if v is None else check_title(v)

    @field_validator("description")
    @classmethod
    def description_rule(cls, v: str | None):
        return check_description(v)


class TodoOut(ApiModel):
    id: int
    created_at: datetime
    updated_at: datetime
    version: int
    created_by_id: int
    updated_by_id: int
    title: str
    description: str | None
    is_closed: bool

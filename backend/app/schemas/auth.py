from pydantic import BaseModel, field_validator

class LoginIn(BaseModel):
    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def not_empty(cls, v: str):
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("username")
    @classmethod
    def lowercase(cls, v: str):
        if v != v.lower():
            raise ValueError("username must be lowercase")
        return v

class TokenOut(BaseModel):
    access_token: str

class TokenPayload(BaseModel):
    sub: int
    username: str

from pydantic import BaseModel, EmailStr, Field, field_validator

from .security.validators import sanitize_email, sanitize_string


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return sanitize_email(v) if isinstance(v, str) else v


class RegisterRequest(BaseModel):
    email: EmailStr
    # bcrypt limit is 72 bytes
    password: str = Field(min_length=8, max_length=72)
    full_name: str = Field(alias="fullName", min_length=2, max_length=100)
    role_id: str = Field(alias="roleId", min_length=1, max_length=64)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return sanitize_email(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return v

    @field_validator("full_name")
    @classmethod
    def clean_full_name(cls, v: str) -> str:
        return sanitize_string(v)


class ClientErrorReport(BaseModel):
    message: str = Field(max_length=2000)
    stack: str | None = Field(default=None, max_length=10000)
    url: str | None = Field(default=None, max_length=2048)
    user_agent: str | None = Field(default=None, alias="userAgent", max_length=1024)
    timestamp: str | None = None

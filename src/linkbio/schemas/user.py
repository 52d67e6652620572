from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from src.linkbio.core.security import MAX_PASSWORD_BYTES
from src.linkbio.schemas.profile import Profile, ProfileBase


def check_password_length(password: str) -> str:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_length(value)


class UserLogin(BaseModel):
    email_or_username: str
    password: str


class UserMeUpdate(ProfileBase):
    """Account fields plus styling fields, updated together from /users/me."""

    username: Optional[str] = Field(default=None, min_length=1, max_length=64)
    email: Optional[EmailStr] = None
    bio: Optional[str] = None


class User(BaseModel):
    id: int
    username: str
    email: str
    bio: Optional[str] = None
    email_verified: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True


class PublicUser(BaseModel):
    username: str
    email: str
    email_verified: bool

    class Config:
        from_attributes = True


class UserWithProfile(BaseModel):
    user: User
    profile: Optional[Profile]


class PublicUserWithProfile(BaseModel):
    user: PublicUser
    profile: Optional[Profile]


class RegisterResponse(BaseModel):
    message: str
    token: str


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


class Token(BaseModel):
    token: str


class RefreshRequest(BaseModel):
    token: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordUpdate(BaseModel):
    token: str
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_length(value)


class Message(BaseModel):
    message: str

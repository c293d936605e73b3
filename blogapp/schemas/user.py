# blogapp/schemas/user.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

Role = Literal["admin", "user"]

class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)

class UserCreate(UserBase):
    password: str = Field(min_length=8)
    bio: str | None = None
    avatar: str | None = None


class UserRead(UserBase):
    id: int
    role: Role = "user"
    bio: str = ""
    avatar: str | None = None
    created_at: datetime


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    bio: str | None = None
    avatar: str | None = None

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenData(BaseModel):
    sub: str | None = None


class SessionRead(BaseModel):
    is_authenticated: bool
    user: UserRead | None = None

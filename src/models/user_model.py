from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from src.models.base import ApiModel
from src.utils.security import password_problems

PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"


class Role(str, Enum):
    student = "student"
    admin = "admin"


class Address(ApiModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: Optional[str] = None


def _check_password(value: str) -> str:
    problems = password_problems(value)
    if problems:
        raise ValueError("Password must contain " + ", ".join(problems))
    return value


class UserRegister(ApiModel):
    fullName: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    password: str

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v)


class UserLogin(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserDetailsUpdate(ApiModel):
    fullName: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[Address] = None
    photo: Optional[str] = None


class PasswordUpdate(ApiModel):
    currentPassword: str
    newPassword: str

    @field_validator("newPassword")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v)


class AdminUserUpdate(UserDetailsUpdate):
    role: Optional[Role] = None
    isActive: Optional[bool] = None
    isVerified: Optional[bool] = None

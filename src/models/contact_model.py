from pydantic import EmailStr, Field

from src.models.base import ApiModel


class ContactIn(ApiModel):
    fullName: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)


class ContactUpdate(ApiModel):
    isRead: bool = True

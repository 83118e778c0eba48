from pydantic import BaseModel, EmailStr, Field
from uuid import UUID

from app.models import UserRole


class UserCreate(BaseModel):
    user_name: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=8)


class UserCreateResponse(BaseModel):
    message: str
    user_id: UUID
    role: UserRole

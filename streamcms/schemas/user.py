from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    email: EmailStr = Field(..., description="A valid email address.")
    password: str = Field(..., min_length=8, max_length=72, description="Password must be between 8 and 72 characters.")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    email: str
    role: str
    created_at: datetime

    @field_validator("role", mode="before")
    @classmethod
    def role_name(cls, v):
        return getattr(v, "name", v)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

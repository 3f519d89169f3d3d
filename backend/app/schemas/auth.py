from pydantic import BaseModel, EmailStr, field_validator
from pydantic import ConfigDict
from datetime import datetime
import uuid


class UserRegister(BaseModel):
    first_name: str
    email: EmailStr
    password: str

    @field_validator("first_name")
    @classmethod
    def first_name_length(cls, v: str) -> str:
        v = v.strip()
        if not 3 <= len(v) <= 20:
            raise ValueError("First name must be between 3 and 20 characters")
        return v

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        # bcrypt only hashes the first 72 bytes
        if len(v.encode()) > 72:
            raise ValueError("Password must be at most 72 bytes")
        if not any(c.isupper() for c in v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one digit")
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    email: str
    role: str
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse

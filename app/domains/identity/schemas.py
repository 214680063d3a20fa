from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from datetime import datetime
import uuid


class UserCreate(BaseModel):
    """Регистрация: email для поиска при выдаче доступа, имя и пароль"""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=100, pattern=r"^[A-Za-z0-9_-]+$")
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if not any(c.isupper() for c in v) or not any(c.islower() for c in v):
            raise ValueError('Password must mix uppercase and lowercase letters')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one digit')
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Публичные данные пользователя, без хеша пароля"""
    uuid: uuid.UUID
    email: EmailStr
    username: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

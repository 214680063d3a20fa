from sqlalchemy import Column, String, Boolean

from app.db.base import BaseModel


class User(BaseModel):
    """Учетная запись; по email находится получатель при выдаче доступа"""
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    # Неактивный пользователь не проходит аутентификацию
    is_active = Column(Boolean, default=True, nullable=False)

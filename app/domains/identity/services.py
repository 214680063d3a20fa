import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.exceptions import ConflictError
from app.core.security import create_access_token, verify_token
from app.db.repositories.user_repository import UserRepository
from app.domains.identity.entities import User
from app.domains.identity.schemas import UserCreate, UserLogin

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис для работы с идентификацией и аутентификацией пользователей"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)
    
    async def register_user(self, user_data: UserCreate) -> User:
        """Регистрация нового пользователя"""
        if await self.user_repository.email_exists(user_data.email):
            raise ConflictError("Email already registered")
        
        if await self.user_repository.username_exists(user_data.username):
            raise ConflictError("Username already taken")
        
        user = User.create_user(
            email=user_data.email,
            username=user_data.username,
            password=user_data.password
        )
        
        try:
            created = await self.user_repository.create(user)
        except ValueError as e:
            raise ConflictError(str(e))

        logger.info(f"User {created.uuid} registered")
        return created
    
    async def authenticate_user(self, login_data: UserLogin) -> Optional[User]:
        """Аутентификация пользователя"""
        user = await self.user_repository.get_by_email(login_data.email)
        
        if not user or not user.is_active:
            return None
        
        if not user.authenticate(login_data.password):
            return None
        
        return user
    
    async def login_user(self, login_data: UserLogin) -> Optional[str]:
        """Вход пользователя и создание JWT токена"""
        user = await self.authenticate_user(login_data)
        
        if not user:
            logger.warning(f"Failed login attempt for {login_data.email}")
            return None
        
        token_data = {
            "sub": str(user.uuid),
            "username": user.username,
            "email": user.email
        }
        
        return create_access_token(data=token_data)
    
    async def get_current_user_from_token(self, token: str) -> Optional[User]:
        """Получение текущего пользователя из JWT токена"""
        payload = verify_token(token)
        if not payload or not payload.get("sub"):
            return None

        try:
            user_uuid = uuid.UUID(payload["sub"])
        except (TypeError, ValueError):
            return None
        
        user = await self.user_repository.get_by_uuid(user_uuid)
        
        if user is None or not user.is_active:
            return None
        
        return user

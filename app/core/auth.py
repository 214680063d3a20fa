from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.exceptions import UnauthenticatedError
from app.domains.identity.entities import User
from app.domains.identity.services import IdentityService

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Зависимость для получения текущего пользователя"""
    if credentials is None:
        raise UnauthenticatedError("Not authenticated")

    identity_service = IdentityService(db)
    user = await identity_service.get_current_user_from_token(credentials.credentials)

    if not user:
        raise UnauthenticatedError()

    return user

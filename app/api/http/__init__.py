from app.api.http.health import router as health_router
from app.api.http.auth import router as auth_router
from app.api.http.documents import router as documents_router

__all__ = [
    "health_router",
    "auth_router",
    "documents_router"
]

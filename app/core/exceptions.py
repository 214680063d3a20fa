import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DocShareError(Exception):
    """Базовое исключение приложения"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.error = error
        self.headers = headers
        super().__init__(message)


class UnauthenticatedError(DocShareError):
    """Нет или неверные учетные данные"""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials", error: Optional[str] = None):
        super().__init__(message, error, headers={"WWW-Authenticate": "Bearer"})


class DocumentNotFoundError(DocShareError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Document not found", error: Optional[str] = None):
        super().__init__(message, error)


class UserNotFoundError(DocShareError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "User not found", error: Optional[str] = None):
        super().__init__(message, error)


class ForbiddenError(DocShareError):
    """Пользователь аутентифицирован, но не имеет прав на действие"""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(DocShareError):
    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(DocShareError):
    """Ошибка хранилища документов и пользователей"""


class NotificationError(DocShareError):
    """Ошибка доставки уведомления"""

    def __init__(self, message: str = "Failed to send email", error: Optional[str] = None):
        super().__init__(message, error)


async def docshare_exception_handler(request: Request, exc: DocShareError) -> JSONResponse:
    """Преобразование исключений приложения в JSON ответ"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.error})")

    return error_response(exc.status_code, exc.message, exc.error, exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Ошибки валидации запроса в том же формате, что и остальные ошибки"""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"{request.method} {request.url.path} validation failed: {details}")

    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP исключения фреймворка (неизвестный маршрут, неверный метод)"""
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Все необработанные исключения"""
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
        exc_info=True
    )

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        str(exc) or type(exc).__name__
    )


def error_response(
    status_code: int,
    message: str,
    error: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = {"message": message}
    if error:
        content["error"] = error

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def setup_exception_handlers(app: FastAPI) -> None:
    """Регистрация обработчиков исключений"""
    app.add_exception_handler(DocShareError, docshare_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    # Последний рубеж: ответ 500 в формате {"message", "error"}
    app.add_exception_handler(Exception, general_exception_handler)

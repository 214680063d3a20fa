import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.db import Base, engine
from app.core.exceptions import setup_exception_handlers
from app.api.http.health import router as health_router
from app.api.http.auth import router as auth_router
from app.api.http.documents import router as documents_router
from app.db import models  # noqa: F401  регистрирует таблицы в Base.metadata

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Создание таблиц при старте и освобождение пула соединений при остановке"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables are ready")
    yield
    await engine.dispose()


app = FastAPI(
    title="DocShare",
    description="Совместная работа с документами: создание, редактирование и общий доступ",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Подключаем роутеры
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "DocShare API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }

import logging
from contextlib import asynccontextmanager
from typing import Optional, List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.exceptions import (
    DocumentNotFoundError, ForbiddenError, NotificationError, StorageError,
    UnauthenticatedError, UserNotFoundError
)
from app.core.mailer import EmailNotificationSender
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.user_repository import UserRepository
from app.domains.documents.entities import Document

logger = logging.getLogger(__name__)


@asynccontextmanager
async def storage_errors(message: str):
    """Превращает ошибки SQLAlchemy в StorageError с сообщением операции"""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"{message}: {e}")
        raise StorageError(message, error=str(e)) from e


class DocumentService:
    """Сервис доступа к документам и совместного использования"""

    def __init__(self, session: AsyncSession, notifier: Optional[EmailNotificationSender] = None):
        self.session = session
        self.notifier = notifier
        self.document_repository = DocumentRepository(session)
        self.user_repository = UserRepository(session)

    async def create_document(self, owner_id: uuid.UUID, title: Optional[str] = None) -> Document:
        """Создание нового документа, вызывающий становится владельцем"""
        self._require_caller(owner_id)

        document = Document.create_document(owner_id=owner_id, title=title)

        async with storage_errors("Error creating document"):
            created = await self.document_repository.create(document)

        logger.info(f"Document {created.uuid} created by {owner_id}")
        return created

    async def list_accessible_documents(self, user_id: uuid.UUID) -> List[Document]:
        """Документы, которыми пользователь владеет или к которым имеет доступ"""
        self._require_caller(user_id)

        async with storage_errors("Error fetching documents"):
            return await self.document_repository.get_accessible(user_id)

    async def get_document(self, user_id: uuid.UUID, document_uuid: uuid.UUID) -> Document:
        """Получение документа с проверкой доступа"""
        self._require_caller(user_id)

        async with storage_errors("Failed to load document"):
            document = await self._load_document(document_uuid)

        self._authorize(
            document.access().can_access(user_id),
            user_id, document,
            "You don't have access to this document"
        )
        return document

    async def update_content(
        self,
        user_id: uuid.UUID,
        document_uuid: uuid.UUID,
        new_content: str
    ) -> Document:
        """Полная замена содержимого документа, побеждает последняя запись"""
        self._require_caller(user_id)

        async with storage_errors("Failed to update document"):
            document = await self._load_document(document_uuid)

            self._authorize(
                document.access().can_edit(user_id),
                user_id, document,
                "You don't have permission to edit this document"
            )

            document.update_content(new_content)
            updated = await self.document_repository.update_content(document)

        logger.info(f"Document {document_uuid} content updated by {user_id}")
        return updated

    async def add_collaborator_by_email(
        self,
        user_id: uuid.UUID,
        document_uuid: uuid.UUID,
        email: str
    ) -> bool:
        """Добавление соавтора по email. Только владелец, повторное добавление ничего не меняет"""
        self._require_caller(user_id)

        async with storage_errors("Share failed"):
            collaborator = await self.user_repository.get_by_email(email)
            if not collaborator:
                raise UserNotFoundError()

            document = await self._load_document(document_uuid)

            self._authorize(
                document.access().can_share(user_id),
                user_id, document,
                "Only the owner can share this document"
            )

            if document.access().is_collaborator(collaborator.uuid):
                return False

            # Репозиторий еще раз проверяет членство непосредственно перед записью
            added = await self.document_repository.add_collaborator(document_uuid, collaborator.uuid)

        if added:
            logger.info(f"User {collaborator.uuid} added as collaborator to document {document_uuid}")
        return added

    async def notify_share_by_email(self, document_uuid: uuid.UUID, email: str) -> None:
        """Отправка ссылки на документ по email.

        Не требует аутентификации и не добавляет получателя в соавторы.
        """
        async with storage_errors("Failed to send email"):
            document = await self.document_repository.get_by_uuid(document_uuid)

        if not document:
            raise DocumentNotFoundError()

        if self.notifier is None:
            raise NotificationError(error="Notification sender is not configured")

        await self.notifier.send(email, document.uuid)

    async def _load_document(self, document_uuid: uuid.UUID) -> Document:
        document = await self.document_repository.get_by_uuid(document_uuid)
        if not document:
            raise DocumentNotFoundError()
        return document

    def _authorize(self, allowed: bool, user_id: uuid.UUID, document: Document, message: str) -> None:
        """Общая проверка прав для всех операций с документом"""
        if not allowed:
            logger.warning(f"User {user_id} denied on document {document.uuid}: {message}")
            raise ForbiddenError(message)

    @staticmethod
    def _require_caller(user_id: Optional[uuid.UUID]) -> None:
        if user_id is None:
            raise UnauthenticatedError()


from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, insert, and_, or_
from sqlalchemy.exc import IntegrityError
import uuid

from app.db.models.document import Document as DocumentModel, document_collaborators

if TYPE_CHECKING:
    from app.domains.documents.entities import Document


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            uuid=document.uuid,
            title=document.title,
            content=document.content,
            owner_id=document.owner_id,
            created_at=document.created_at,
            updated_at=document.updated_at
        )

        self.session.add(db_document)
        try:
            await self.session.commit()
        except IntegrityError:
            # Нарушение внешнего ключа owner_id
            await self.session.rollback()
            raise

        return await self.get_by_uuid(document.uuid)

    async def get_by_uuid(self, document_uuid: uuid.UUID) -> Optional["Document"]:
        """Получение документа по UUID вместе со списком соавторов"""
        result = await self.session.execute(
            select(DocumentModel)
            .where(DocumentModel.uuid == document_uuid)
            .execution_options(populate_existing=True)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def get_accessible(self, user_id: uuid.UUID) -> List["Document"]:
        """Документы, где пользователь владелец или соавтор, сначала недавно измененные"""
        shared_with_user = (
            select(document_collaborators.c.document_id)
            .where(document_collaborators.c.user_id == user_id)
        )
        result = await self.session.execute(
            select(DocumentModel)
            .where(
                or_(
                    DocumentModel.owner_id == user_id,
                    DocumentModel.uuid.in_(shared_with_user)
                )
            )
            .order_by(DocumentModel.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        db_documents = result.scalars().all()
        return [self._to_domain(doc) for doc in db_documents]

    async def update_content(self, document: "Document") -> "Document":
        """Сохранение содержимого документа"""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.uuid == document.uuid)
            .values(
                content=document.content,
                updated_at=document.updated_at
            )
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_uuid(document.uuid)

    async def is_collaborator(self, document_uuid: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Проверка наличия пользователя среди соавторов"""
        result = await self.session.execute(
            select(document_collaborators.c.user_id).where(
                and_(
                    document_collaborators.c.document_id == document_uuid,
                    document_collaborators.c.user_id == user_id
                )
            )
        )
        return result.scalar_one_or_none() is not None

    async def add_collaborator(self, document_uuid: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Добавление соавтора. Возвращает False, если он уже был добавлен"""
        # Повторная проверка непосредственно перед записью
        if await self.is_collaborator(document_uuid, user_id):
            return False

        try:
            await self.session.execute(
                insert(document_collaborators).values(
                    document_id=document_uuid,
                    user_id=user_id
                )
            )
            await self.session.commit()
        except IntegrityError:
            # Параллельный запрос успел добавить того же соавтора
            await self.session.rollback()
            return False

        return True

    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.documents.entities import Document

        return Document(
            uuid=db_document.uuid,
            title=db_document.title,
            content=db_document.content,
            owner_id=db_document.owner_id,
            collaborators=[user.uuid for user in db_document.collaborators],
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )

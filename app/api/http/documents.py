from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.core.auth import get_current_user
from app.core.db import get_db
from app.core.mailer import EmailNotificationSender, get_notification_sender
from app.domains.documents.schemas import (
    DocumentCreate, DocumentContentUpdate, DocumentResponse,
    DocumentShareRequest, MessageResponse
)
from app.domains.documents.services import DocumentService
from app.domains.identity.entities import User

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: Optional[DocumentCreate] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Создание нового документа"""
    document_service = DocumentService(db)
    title = document_data.title if document_data else None
    document = await document_service.create_document(current_user.uuid, title)
    return DocumentResponse.from_entity(document)


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Документы пользователя: свои и те, к которым открыт доступ"""
    document_service = DocumentService(db)
    documents = await document_service.list_accessible_documents(current_user.uuid)
    return [DocumentResponse.from_entity(doc) for doc in documents]


@router.get("/{document_uuid}", response_model=DocumentResponse)
async def get_document(
    document_uuid: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Получение документа по UUID"""
    document_service = DocumentService(db)
    document = await document_service.get_document(current_user.uuid, document_uuid)
    return DocumentResponse.from_entity(document)


@router.put("/{document_uuid}", response_model=DocumentResponse)
async def update_document(
    document_uuid: uuid.UUID,
    update_data: DocumentContentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Обновление содержимого документа"""
    document_service = DocumentService(db)
    document = await document_service.update_content(
        current_user.uuid,
        document_uuid,
        update_data.content
    )
    return DocumentResponse.from_entity(document)


@router.post("/{document_uuid}/share", response_model=MessageResponse)
async def share_document(
    document_uuid: uuid.UUID,
    share_request: DocumentShareRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Добавление соавтора по email (только владелец)"""
    document_service = DocumentService(db)
    await document_service.add_collaborator_by_email(
        current_user.uuid,
        document_uuid,
        share_request.email
    )
    return MessageResponse(message="User added as collaborator")


# Доступно без аутентификации и не открывает доступ к документу
@router.post("/{document_uuid}/share-email", response_model=MessageResponse)
async def share_document_by_email(
    document_uuid: uuid.UUID,
    share_request: DocumentShareRequest,
    db: AsyncSession = Depends(get_db),
    notifier: EmailNotificationSender = Depends(get_notification_sender)
):
    """Отправка ссылки на документ по email"""
    document_service = DocumentService(db, notifier=notifier)
    await document_service.notify_share_by_email(document_uuid, share_request.email)
    return MessageResponse(message="Email sent successfully")

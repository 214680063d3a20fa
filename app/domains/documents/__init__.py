from app.domains.documents.entities import Document, DocumentAccess, DEFAULT_TITLE
from app.domains.documents.schemas import (
    DocumentCreate, DocumentContentUpdate, DocumentResponse,
    DocumentShareRequest, MessageResponse
)
from app.domains.documents.services import DocumentService

__all__ = [
    "Document", "DocumentAccess", "DEFAULT_TITLE",
    "DocumentCreate", "DocumentContentUpdate", "DocumentResponse",
    "DocumentShareRequest", "MessageResponse",
    "DocumentService"
]

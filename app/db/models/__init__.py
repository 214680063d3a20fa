from app.db.models.user import User
from app.db.models.document import Document, document_collaborators

__all__ = [
    "User",
    "Document",
    "document_collaborators"
]

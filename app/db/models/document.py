from datetime import datetime

from sqlalchemy import Column, String, Text, ForeignKey, Uuid, Table, DateTime
from sqlalchemy.orm import relationship

from app.core.db import Base
from app.db.base import BaseModel


# Составной первичный ключ не допускает повторного добавления соавтора
document_collaborators = Table(
    "document_collaborators",
    Base.metadata,
    Column("document_id", Uuid, ForeignKey("documents.uuid", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid, ForeignKey("users.uuid", ondelete="CASCADE"), primary_key=True),
    Column("added_at", DateTime, default=datetime.utcnow, nullable=False),
)


class Document(BaseModel):
    __tablename__ = "documents"
    
    title = Column(String(255), nullable=False)
    content = Column(Text, default="", nullable=False)
    owner_id = Column(Uuid, ForeignKey("users.uuid"), nullable=False, index=True)
    
    # Relationships
    collaborators = relationship(
        "User",
        secondary=document_collaborators,
        order_by=document_collaborators.c.added_at,
        lazy="selectin"
    )

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional, List
import uuid
from datetime import datetime


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: Optional[str] = Field(None, max_length=255)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        # Пустой заголовок заменяется заголовком по умолчанию
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class DocumentContentUpdate(BaseModel):
    """Схема для обновления содержимого документа"""
    content: str = Field(..., max_length=1000000)  # 1MB max content


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    uuid: uuid.UUID
    title: str
    content: str
    owner_id: uuid.UUID
    collaborators: List[uuid.UUID]
    created_at: datetime
    updated_at: datetime
    word_count: int
    content_length: int

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, document) -> "DocumentResponse":
        return cls(
            uuid=document.uuid,
            title=document.title,
            content=document.content,
            owner_id=document.owner_id,
            collaborators=document.collaborators,
            created_at=document.created_at,
            updated_at=document.updated_at,
            word_count=document.get_word_count(),
            content_length=document.get_content_length()
        )


class DocumentShareRequest(BaseModel):
    """Схема для запроса на предоставление доступа к документу"""
    email: EmailStr


class MessageResponse(BaseModel):
    message: str

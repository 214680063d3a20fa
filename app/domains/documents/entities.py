import uuid
from datetime import datetime
from typing import Optional, Iterable

DEFAULT_TITLE = "Untitled Document"


class Document:
    """Сущность документа домена Documents"""

    def __init__(
        self,
        uuid: uuid.UUID,
        title: str,
        content: str = "",
        owner_id: uuid.UUID = None,
        collaborators: Optional[Iterable[uuid.UUID]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.title = title
        self.content = content
        self.owner_id = owner_id
        # Порядок добавления сохраняется, повторы отбрасываются
        self.collaborators = list(dict.fromkeys(collaborators or []))
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def update_content(self, new_content: str) -> None:
        """Полная замена содержимого документа"""
        self.content = new_content
        # updated_at не должен уходить назад даже при расхождении часов
        self.updated_at = max(datetime.utcnow(), self.updated_at)

    def get_content_length(self) -> int:
        """Получение длины содержимого документа"""
        return len(self.content)

    def get_word_count(self) -> int:
        """Подсчет количества слов в документе"""
        if not self.content.strip():
            return 0
        return len(self.content.split())

    def access(self) -> "DocumentAccess":
        """Права доступа к документу"""
        return DocumentAccess(self.uuid, self.owner_id, self.collaborators)

    @classmethod
    def create_document(cls, owner_id: uuid.UUID, title: Optional[str] = None) -> "Document":
        """Создание нового пустого документа"""
        return cls(
            uuid=uuid.uuid4(),
            title=title or DEFAULT_TITLE,
            content="",
            owner_id=owner_id
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid

    def __hash__(self) -> int:
        return hash(self.uuid)

    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, title={self.title}, owner_id={self.owner_id})"


class DocumentAccess:
    """Сущность для управления доступом к документу"""

    def __init__(
        self,
        document_id: uuid.UUID,
        owner_id: uuid.UUID,
        collaborators: Optional[Iterable[uuid.UUID]] = None
    ):
        self.document_id = document_id
        self.owner_id = owner_id
        self._collaborators = set(collaborators or [])

    def is_owner(self, user_id: uuid.UUID) -> bool:
        """Проверка является ли пользователь владельцем"""
        return user_id == self.owner_id

    def is_collaborator(self, user_id: uuid.UUID) -> bool:
        """Проверка является ли пользователь соавтором"""
        return user_id in self._collaborators

    def can_access(self, user_id: uuid.UUID) -> bool:
        """Проверка доступа пользователя к документу"""
        return self.is_owner(user_id) or self.is_collaborator(user_id)

    def can_edit(self, user_id: uuid.UUID) -> bool:
        """Проверка прав на редактирование"""
        # Редактировать может любой, у кого есть доступ
        return self.can_access(user_id)

    def can_share(self, user_id: uuid.UUID) -> bool:
        """Проверка прав на добавление соавторов"""
        return self.is_owner(user_id)

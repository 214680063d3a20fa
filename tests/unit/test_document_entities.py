"""
Unit tests for the document entity and the shared access predicate.
"""

import uuid
from datetime import datetime, timedelta

import pytest

from app.domains.documents.entities import Document, DocumentAccess, DEFAULT_TITLE


class TestDocumentCreation:

    @pytest.mark.unit
    def test_create_document_defaults(self):
        owner_id = uuid.uuid4()

        document = Document.create_document(owner_id=owner_id)

        assert document.title == DEFAULT_TITLE == "Untitled Document"
        assert document.content == ""
        assert document.collaborators == []
        assert document.owner_id == owner_id
        assert isinstance(document.uuid, uuid.UUID)

    @pytest.mark.unit
    def test_create_document_with_title(self):
        document = Document.create_document(owner_id=uuid.uuid4(), title="My Doc")

        assert document.title == "My Doc"

    @pytest.mark.unit
    def test_collaborators_are_deduplicated_in_insertion_order(self):
        first, second = uuid.uuid4(), uuid.uuid4()

        document = Document(
            uuid=uuid.uuid4(),
            title="Doc",
            owner_id=uuid.uuid4(),
            collaborators=[first, second, first],
        )

        assert document.collaborators == [first, second]


class TestDocumentContent:

    @pytest.mark.unit
    def test_update_content_replaces_content(self):
        document = Document.create_document(owner_id=uuid.uuid4())
        document.content = "old text"

        document.update_content("new text")

        assert document.content == "new text"

    @pytest.mark.unit
    def test_update_content_advances_updated_at(self):
        document = Document.create_document(owner_id=uuid.uuid4())
        previous = datetime.utcnow() - timedelta(minutes=5)
        document.updated_at = previous

        document.update_content("text")

        assert document.updated_at > previous

    @pytest.mark.unit
    def test_update_content_never_moves_updated_at_backwards(self):
        document = Document.create_document(owner_id=uuid.uuid4())
        future = datetime.utcnow() + timedelta(hours=1)
        document.updated_at = future

        document.update_content("text")

        assert document.updated_at == future

    @pytest.mark.unit
    def test_word_count_and_length(self):
        document = Document.create_document(owner_id=uuid.uuid4())
        document.update_content("hello collaborative world")

        assert document.get_word_count() == 3
        assert document.get_content_length() == len("hello collaborative world")

        document.update_content("   ")
        assert document.get_word_count() == 0


class TestDocumentAccess:

    owner_id = uuid.uuid4()
    collaborator_id = uuid.uuid4()
    stranger_id = uuid.uuid4()

    @pytest.fixture
    def access(self):
        return DocumentAccess(uuid.uuid4(), self.owner_id, [self.collaborator_id])

    @pytest.mark.unit
    def test_owner_can_access_edit_and_share(self, access):
        assert access.can_access(self.owner_id)
        assert access.can_edit(self.owner_id)
        assert access.can_share(self.owner_id)

    @pytest.mark.unit
    def test_collaborator_can_access_and_edit_but_not_share(self, access):
        assert access.can_access(self.collaborator_id)
        assert access.can_edit(self.collaborator_id)
        assert not access.can_share(self.collaborator_id)

    @pytest.mark.unit
    def test_stranger_has_no_rights(self, access):
        assert not access.can_access(self.stranger_id)
        assert not access.can_edit(self.stranger_id)
        assert not access.can_share(self.stranger_id)

    @pytest.mark.unit
    def test_ids_compared_by_value(self, access):
        owner_copy = uuid.UUID(str(self.owner_id))
        collaborator_copy = uuid.UUID(str(self.collaborator_id))

        assert access.is_owner(owner_copy)
        assert access.is_collaborator(collaborator_copy)

    @pytest.mark.unit
    def test_document_access_reflects_document_state(self):
        owner_id, collaborator_id = uuid.uuid4(), uuid.uuid4()
        document = Document(
            uuid=uuid.uuid4(),
            title="Doc",
            owner_id=owner_id,
            collaborators=[collaborator_id],
        )

        access = document.access()

        assert access.document_id == document.uuid
        assert access.is_owner(owner_id)
        assert access.is_collaborator(collaborator_id)

"""
Unit tests for the signing data models.
"""

from datetime import date, datetime, timezone

import pytest

from esign.models.user import SigningPageData, User, UserVersion
from esign.models.version import Version


class TestUserModels:
    """Tests for user and user-version models."""

    @pytest.mark.unit
    def test_user_repr(self):
        user = User(id=3, first_name="Jo", last_name="Doe", email="jo@doe.com")

        assert repr(user) == "<User(id=3, email='jo@doe.com')>"
        assert user.archived_at is None

    @pytest.mark.unit
    def test_user_version_serializes_signed_at(self):
        signed_at = datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc)
        user_version = UserVersion(
            id=1, user_id=2, version_id=3, token="AbC123xYz0", signed_at=signed_at
        )

        data = user_version.model_dump()

        assert data["signed_at"] == "2024-03-05T14:30:00+00:00"
        assert data["signature"] is None

    @pytest.mark.unit
    def test_unsigned_user_version(self):
        user_version = UserVersion(id=1, user_id=2, version_id=3)

        assert user_version.model_dump()["signed_at"] is None

    @pytest.mark.unit
    def test_version_accepts_string_document_id(self):
        assert Version(id=4, document_id="doc1").document_id == "doc1"


class TestSigningPageData:
    """Tests for signing page data."""

    @pytest.mark.unit
    def test_from_store_mapping_keeps_extra_fields(self):
        page_data = SigningPageData.from_store(
            {"docDate": date(2024, 1, 2), "firstName": "Jo", "docName": "NDA"}
        )

        assert page_data.doc_date == date(2024, 1, 2)
        assert page_data.model_dump(by_alias=True) == {
            "docDate": date(2024, 1, 2),
            "firstName": "Jo",
            "docName": "NDA",
        }

    @pytest.mark.unit
    def test_from_store_model_is_copied(self):
        original = SigningPageData(doc_date=date(2024, 1, 2), docName="NDA")

        copied = SigningPageData.from_store(original)
        copied.doc_date = "02/01/2024"

        assert copied is not original
        assert copied.docName == "NDA"
        assert original.doc_date == date(2024, 1, 2)

    @pytest.mark.unit
    def test_doc_date_required(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            SigningPageData.from_store({"docName": "NDA"})

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class UserCreate(BaseModel):
    """Normalized user data handed to the user store."""

    first_name: str = Field(..., description="User's first name (trimmed)")
    last_name: str = Field(..., description="User's last name (trimmed)")
    email: str = Field(..., description="User email (unique)")


class User(UserCreate):
    """Persisted signer."""

    id: int = Field(..., description="Unique user identifier")
    archived_at: Optional[datetime] = Field(
        None, description="When the user was archived (soft delete)"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


class UserVersion(BaseModel):
    """Link between a user and a document version, carrying signing state."""

    id: int = Field(..., description="User-version identifier")
    user_id: int = Field(..., description="Signer (foreign key)")
    version_id: int = Field(..., description="Document version (foreign key)")
    token: Optional[str] = Field(None, description="Signing token issued for this link")
    signature: Optional[str] = Field(None, description="Signature payload")
    signed_at: Optional[datetime] = Field(None, description="When the document was signed")
    image: Optional[bytes] = Field(None, description="Captured signature image")

    @field_serializer("signed_at")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        """Serialize datetime fields to ISO format."""
        return value.isoformat() if value else None


class SigningPageData(BaseModel):
    """Data rendered on the signing page for a token.

    Stores may return any extra fields; they are passed through untouched.
    """

    doc_date: Union[datetime, date, str] = Field(
        ..., alias="docDate", description="Document date, formatted for display"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @classmethod
    def from_store(cls, data: Any) -> "SigningPageData":
        """Build from a store result (mapping or model instance)."""
        if isinstance(data, cls):
            return data.model_copy()
        if isinstance(data, BaseModel):
            data = data.model_dump(by_alias=True)
        return cls.model_validate(data)

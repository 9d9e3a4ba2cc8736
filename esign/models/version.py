from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field


class Version(BaseModel):
    """A stored revision of a document."""

    id: int = Field(..., description="Version identifier")
    document_id: Union[int, str] = Field(..., description="Owning document")
    created_at: Optional[datetime] = Field(
        None, description="When the version was uploaded; latest wins"
    )

"""Data models for uploaded files and upload options."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class File(BaseModel):
    """Metadata for a stored blob.

    Produced by a successful upload or a stat lookup, never mutated.
    """
    model_config = ConfigDict(frozen=True)

    digest: str                     # lowercase hex sha256
    size: int = Field(ge=0)         # bytes
    content_type: str = ""          # empty when unknown or unchecked


class UploadOptions(BaseModel):
    """Configuration for optional behaviours of upload."""

    # If set, only content sniffed as one of these MIME types is accepted.
    accepted_types: List[str] = Field(default_factory=list)

    @field_validator("accepted_types")
    @classmethod
    def strip_blank_types(cls, v: List[str]) -> List[str]:
        """Drop empty entries so an all-blank list disables checking."""
        return [t.strip() for t in v if t and t.strip()]

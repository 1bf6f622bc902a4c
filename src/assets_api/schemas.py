####################################
# --- Request/response schemas --- #
####################################

from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)
from pydantic.alias_generators import to_camel


class Visibility(str, Enum):
    """Partition of an asset. Fixed at upload time."""
    PUBLIC = "public"
    PRIVATE = "private"


class Asset(BaseModel):
    """Metadata of one uploaded file, as stored and as returned by the API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        json_schema_extra={
            "example": {
                "id": "3f1c2b7e-8a4d-4f0e-9b1a-2c6d5e7f8a90",
                "visibility": "private",
                "title": "notes.pdf",
                "fileName": "notes.pdf",
                "mimeType": "application/pdf",
                "size": 1024,
                "blobName": "3f1c2b7e-8a4d-4f0e-9b1a-2c6d5e7f8a90-notes.pdf",
                "blobUrl": "https://uploads.s3.us-east-1.amazonaws.com/3f1c2b7e-8a4d-4f0e-9b1a-2c6d5e7f8a90-notes.pdf",
                "createdAt": "2024-01-01T00:00:00.000000Z",
                "updatedAt": "2024-01-01T00:00:00.000000Z",
            }
        },
    )

    id: str = Field(description="Server-generated identifier.")
    visibility: Visibility = Field(description="Partition key; cannot change after upload.")
    title: str = Field(description="Display title, editable.")
    file_name: str = Field(description="Original file name of the upload.")
    mime_type: str = Field(description="Content type sent with the upload.")
    size: int = Field(ge=0, description="Size of the upload in bytes.")
    blob_name: str = Field(description="Key of the file bytes in the object store.")
    blob_url: Optional[str] = Field(None, description="Address of the blob at upload time. Advisory only.")
    created_at: str = Field(description="ISO-8601 creation time.")
    updated_at: str = Field(description="ISO-8601 time of the last metadata change.")


class UpdateAssetRequest(BaseModel):
    """Body of `PUT /files/:id`. Visibility locates the record, it never moves it."""
    title: Optional[str] = None
    visibility: Optional[str] = None


class DeleteAssetResponse(BaseModel):
    """Response model for `DELETE /files/:id`."""
    deleted: bool = True
    id: str


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    ok: bool = True

"""Shared response schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UPLOADS_URL_PREFIX = "/uploads"


class CamelModel(BaseModel):
    """Base model exposing camelCase keys while accepting snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    message: str = Field(..., examples=["Username updated successfully"])


class BlobReference(CamelModel):
    """
    Reference to an image held in the blob store.

    Images are never embedded in records; every record keeps a filename
    and the API exposes where the file is served.
    """

    kind: Literal["blob"] = "blob"
    filename: str
    url: str

    @classmethod
    def of(cls, folder: str, filename: str | None) -> "BlobReference | None":
        if not filename:
            return None
        return cls(filename=filename, url=f"{UPLOADS_URL_PREFIX}/{folder}/{filename}")


class HealthCheckResponse(BaseModel):
    status: str
    version: str
    timestamp: str

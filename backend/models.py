from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ApiKeyResponse(BaseModel):
    """A stored key as returned by the API, with its display helpers."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    value: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    type: str
    masked_value: str = Field(alias="maskedValue")


class CreateKeyRequest(BaseModel):
    # Optional so that missing fields reach the store's own validation (400).
    name: Optional[str] = None
    value: Optional[str] = None


class UpdateKeyRequest(BaseModel):
    name: Optional[str] = None
    value: Optional[str] = None


class ValidateKeyRequest(BaseModel):
    api_key: Optional[str] = Field(default=None, alias="apiKey")


class ValidateKeyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    message: str
    key_name: Optional[str] = Field(default=None, alias="keyName")


class DeleteKeyResponse(BaseModel):
    success: bool = True


class HealthResponse(BaseModel):
    status: str = "ok"
    backend: str


class ErrorResponse(BaseModel):
    message: str
    code: Optional[str] = None

"""Domain <-> DTO mappers.

Converts between ApiKeyRecord (domain) and the Pydantic request/response DTOs.
"""

from domain.models import ApiKeyRecord, ApiKeyUpdate
from key_classifier import classify, mask
from models import ApiKeyResponse, UpdateKeyRequest


def record_to_dto(record: ApiKeyRecord) -> ApiKeyResponse:
    """Convert a domain ApiKeyRecord to the API response DTO."""
    return ApiKeyResponse(
        id=record.id,
        name=record.name,
        value=record.value,
        created_at=record.created_at,
        updated_at=record.updated_at,
        type=classify(record.value),
        masked_value=mask(record.value),
    )


def records_to_dtos(records: list[ApiKeyRecord]) -> list[ApiKeyResponse]:
    """Convert a list of records to DTOs, preserving order."""
    return [record_to_dto(r) for r in records]


def update_request_to_domain(req: UpdateKeyRequest) -> ApiKeyUpdate:
    return ApiKeyUpdate(name=req.name, value=req.value)

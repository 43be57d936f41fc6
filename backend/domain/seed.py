"""Mock keys used to seed an empty file store and to answer degraded reads."""

import secrets
import uuid

from domain.models import ApiKeyRecord, utc_now

SEED_KEYS = (
    ("Production Key", "prod"),
    ("Staging Key", "stg"),
    ("Local Dev Key", "dev"),
)


def generate_mock_value(prefix: str) -> str:
    return f"{prefix}_{secrets.token_hex(18)}"


def generate_seed_records() -> list[ApiKeyRecord]:
    now = utc_now()
    return [
        ApiKeyRecord(
            id=str(uuid.uuid4()),
            name=name,
            value=generate_mock_value(prefix),
            created_at=now,
            updated_at=now,
        )
        for name, prefix in SEED_KEYS
    ]

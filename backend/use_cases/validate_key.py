"""ValidateKeyUseCase — checks a submitted key against the active store.

The key is looked up by value. When only the file fallback is active, an
unknown key is judged by format heuristics instead. This is a playground
check, not an authentication mechanism.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from errors import ValidationError
from key_classifier import mask, matches_key_pattern
from key_store import KeyStore

logger = logging.getLogger(__name__)


@dataclass
class KeyValidationResult:
    valid: bool
    key_name: Optional[str] = None


class ValidateKeyUseCase:
    def __init__(self, key_store: KeyStore):
        self._key_store = key_store

    def execute(self, api_key: Optional[str]) -> KeyValidationResult:
        if not isinstance(api_key, str) or not api_key.strip():
            raise ValidationError("Invalid API key format")
        candidate = api_key.strip()

        store = self._key_store.backend()
        record = store.get_by_value(candidate)
        if record is not None:
            logger.info(f"API key validated: {record.name}")
            return KeyValidationResult(valid=True, key_name=record.name)

        if store.backend_name == "file" and matches_key_pattern(candidate):
            logger.info(f"API key {mask(candidate)} accepted by format check")
            return KeyValidationResult(valid=True)

        logger.info(f"API key {mask(candidate)} not recognised")
        return KeyValidationResult(valid=False)

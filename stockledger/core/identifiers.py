# stockledger/core/identifiers.py
from typing import Any, Optional
from uuid import UUID


def coerce_id(value: Any) -> Optional[UUID]:
    """Return value as a UUID, or None when it cannot name any row."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        return None

# stockledger/db/types.py
from datetime import timezone
from decimal import Decimal

from sqlalchemy import DateTime, String
from sqlalchemy.types import TypeDecorator

from stockledger.core.quantities import normalize_quantity


class DecimalString(TypeDecorator):
    """Stores a Decimal as its canonical text form.

    Quantities are kept as text so that every backend (SQLite included)
    round-trips them exactly instead of going through a binary float.
    """

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, Decimal):
            value = Decimal(str(value))
        return format(normalize_quantity(value), "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime normalised to UTC on the way in and out.

    SQLite drops tzinfo on storage; attaching UTC on load keeps values read
    back comparable with ones still held in the session.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

# stockledger/db/models/transactions.py
import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Enum, ForeignKey, Index, String, Text, Uuid
import uuid

from stockledger.db.base import Base
from stockledger.db.types import DecimalString, UTCDateTime


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(Base):
    __tablename__ = "transactions"

    """Represents one ledger entry explaining a change to an item's stock.

    A pending entry is an order placed but not yet received; it snapshots the
    stock at order time in both previous_stock and new_stock. A completed
    entry records an applied receipt or adjustment. Fulfilling an order turns
    its pending entry into the completed one in place, so the order's
    ordered_quantity and timestamp stay as history.
    """

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    inventory_id = Column(Uuid(as_uuid=True), ForeignKey("inventory.id"), nullable=False)

    timestamp = Column(UTCDateTime, nullable=False, default=utcnow)

    ordered_quantity = Column(DecimalString, nullable=False, default=Decimal("0"))
    actual_received = Column(DecimalString, nullable=False, default=Decimal("0"))
    previous_stock = Column(DecimalString, nullable=False)
    new_stock = Column(DecimalString, nullable=False)
    consumption = Column(String, nullable=False, default="0")  # legacy, unused

    status = Column(
        Enum(TransactionStatus, name="transaction_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TransactionStatus.PENDING,
    )

    notes = Column(Text, nullable=False, default="")
    employee_name = Column(String, nullable=False, default="")

    __table_args__ = (
        Index("ix_transactions_inventory_id", "inventory_id"),
        Index("ix_transactions_timestamp", "timestamp"),
        Index("ix_transactions_status", "status"),
    )

# stockledger/db/models/inventory.py
from decimal import Decimal

from sqlalchemy import Column, String, Uuid
from uuid import uuid4

from stockledger.db.base import Base
from stockledger.core.quantities import to_decimal_or_zero
from stockledger.db.types import DecimalString


class InventoryItem(Base):
    __tablename__ = "inventory"

    """Represents a stocked item and its current quantity on hand.

    stock_on_hand is derived state: it always equals the value written by the
    latest stock-changing operation on this item. Every other column is a
    descriptive attribute carried through verbatim and never interpreted,
    except stock_up which doubles as the reorder threshold.
    """

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    item = Column(String, nullable=False, default="")
    room = Column(String, nullable=False, default="")
    price = Column(String, nullable=False, default="")
    stock_up = Column(String, nullable=False, default="")
    vendor = Column(String, nullable=False, default="")
    method = Column(String, nullable=False, default="")
    department = Column(String, nullable=False, default="")
    units = Column(String, nullable=False, default="")

    stock_on_hand = Column(DecimalString, nullable=False, default=Decimal("0"))

    @property
    def is_low_stock(self) -> bool:
        """True when stock on hand is below the stock_up reorder threshold."""
        return to_decimal_or_zero(self.stock_on_hand) < to_decimal_or_zero(self.stock_up)

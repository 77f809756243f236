# stockledger/domain/stock/schemas.py
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel
from uuid import UUID
from typing import Any, Optional, Union

from stockledger.db.models.transactions import TransactionStatus

# Raw quantities and ids are parsed by the service so that every rejection
# carries the same field-identifying message whatever the transport, and a
# JSON true is never coerced to 1.

class OrderCreate(BaseModel):
    inventory_id: Optional[Union[UUID, str]] = None
    ordered_quantity: Optional[Any] = None
    notes: Optional[str] = None
    employee_name: Optional[str] = None

class StockUpdate(BaseModel):
    actual_received: Optional[Any] = None
    new_stock: Optional[Any] = None
    notes: Optional[str] = None
    employee_name: Optional[str] = None
    pending_order_id: Optional[Union[UUID, str]] = None

class InventoryItemOut(BaseModel):
    id: UUID
    item: str
    room: str
    price: str
    stock_up: str
    vendor: str
    method: str
    department: str
    units: str
    stock_on_hand: Decimal
    is_low_stock: bool = False

    class Config:
        from_attributes = True

class TransactionOut(BaseModel):
    id: UUID
    inventory_id: UUID
    timestamp: datetime
    ordered_quantity: Decimal
    actual_received: Decimal
    previous_stock: Decimal
    new_stock: Decimal
    consumption: str
    status: TransactionStatus
    notes: str
    employee_name: str

    class Config:
        from_attributes = True

class StockUpdateOut(BaseModel):
    item: InventoryItemOut
    transaction: TransactionOut

    class Config:
        from_attributes = True

class DeleteResult(BaseModel):
    ok: bool = True
    message: str

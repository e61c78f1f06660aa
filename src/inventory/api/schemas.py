"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class AlertSettingsSchema(BaseModel):
    low_stock_enabled: bool = True
    low_stock_threshold: int | None = Field(default=None, ge=0)
    expiration_enabled: bool = True
    expiration_lead_days: int = Field(default=30, ge=0)
    overstock_enabled: bool = True
    overstock_threshold: int | None = Field(default=None, ge=0)


class RegisterItemRequest(BaseModel):
    sku: str
    name: str
    description: str | None = None
    category: str | None = None
    unit: str | None = None
    location: str | None = None
    opening_quantity: int = Field(ge=0, default=0)
    reorder_point: int = Field(ge=0, default=10)
    minimum: int = Field(ge=0, default=0)
    maximum: int | None = Field(default=None, ge=0)
    expires_on: date | None = None
    alert_settings: AlertSettingsSchema | None = None
    actor: str | None = None


class AddMovementRequest(BaseModel):
    movement_type: str
    quantity: int
    reason: str | None = None
    actor: str | None = None
    reference: str | None = None
    notes: str | None = None


class ReserveStockRequest(BaseModel):
    quantity: int = Field(ge=1)
    reason: str | None = None
    actor: str | None = None


class ReleaseReservedStockRequest(BaseModel):
    quantity: int = Field(ge=1)
    reason: str | None = None
    actor: str | None = None


class CheckAlertsRequest(BaseModel):
    as_of: datetime | None = None


class LifecycleRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class InventoryItemIdResponse(BaseModel):
    inventory_item_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class StockLevelsResponse(BaseModel):
    current: int
    reserved: int
    available: int
    status: str
    released: int | None = None
    effect: int | None = None


class AlertResponse(BaseModel):
    kind: str
    priority: str
    message: str


class AlertsResponse(BaseModel):
    alerts: list[AlertResponse]


class MovementResponse(BaseModel):
    sequence: int
    movement_type: str
    quantity: int
    effect: int
    balance_after: int
    reason: str | None = None
    actor: str | None = None
    reference: str | None = None
    recorded_at: datetime


class InventoryItemResponse(BaseModel):
    inventory_item_id: str
    sku: str
    name: str
    status: str
    current: int
    reserved: int
    available: int
    reorder_point: int
    maximum: int | None = None
    total_in: int
    total_out: int
    recent_movements: list[MovementResponse]

"""FastAPI routes for the Inventory domain — the stock ledger."""

import json

from fastapi import APIRouter

from inventory import operations
from inventory.api.schemas import (
    AddMovementRequest,
    AlertsResponse,
    CheckAlertsRequest,
    InventoryItemIdResponse,
    InventoryItemResponse,
    LifecycleRequest,
    MovementResponse,
    RegisterItemRequest,
    ReleaseReservedStockRequest,
    ReserveStockRequest,
    StatusResponse,
    StockLevelsResponse,
)
from inventory.stock.stock import InventoryItem

# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


def _item_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        inventory_item_id=str(item.id),
        sku=item.sku,
        name=item.name,
        status=item.status,
        current=item.stock.current,
        reserved=item.stock.reserved,
        available=item.stock.available,
        reorder_point=item.stock.reorder_point,
        maximum=item.stock.maximum,
        total_in=item.analytics.total_in if item.analytics else 0,
        total_out=item.analytics.total_out if item.analytics else 0,
        recent_movements=[
            MovementResponse(
                sequence=m.sequence,
                movement_type=m.movement_type,
                quantity=m.quantity,
                effect=m.effect,
                balance_after=m.balance_after,
                reason=m.reason,
                actor=m.actor,
                reference=m.reference,
                recorded_at=m.recorded_at,
            )
            for m in item.recent_movements()
        ],
    )


@inventory_router.post("", status_code=201, response_model=InventoryItemIdResponse)
async def register_item(body: RegisterItemRequest) -> InventoryItemIdResponse:
    data = body.model_dump(exclude_none=True, exclude={"alert_settings"})
    if body.alert_settings:
        data["alert_settings"] = json.dumps(body.alert_settings.model_dump(exclude_none=True))
    result = operations.register_item(**data)
    return InventoryItemIdResponse(inventory_item_id=result)


@inventory_router.get("/{inventory_item_id}", response_model=InventoryItemResponse)
async def get_item(inventory_item_id: str) -> InventoryItemResponse:
    return _item_response(operations.get_item(inventory_item_id))


@inventory_router.get("/sku/{sku}", response_model=InventoryItemResponse)
async def get_item_by_sku(sku: str) -> InventoryItemResponse:
    return _item_response(operations.find_item_by_sku(sku))


@inventory_router.post("/{inventory_item_id}/movements", status_code=201, response_model=StockLevelsResponse)
async def add_movement(inventory_item_id: str, body: AddMovementRequest) -> StockLevelsResponse:
    result = operations.add_inventory_movement(inventory_item_id, **body.model_dump())
    return StockLevelsResponse(**result)


@inventory_router.post("/{inventory_item_id}/reserve", response_model=StockLevelsResponse)
async def reserve_stock(inventory_item_id: str, body: ReserveStockRequest) -> StockLevelsResponse:
    result = operations.reserve_stock(inventory_item_id, **body.model_dump())
    return StockLevelsResponse(**result)


@inventory_router.post("/{inventory_item_id}/release", response_model=StockLevelsResponse)
async def release_reserved_stock(inventory_item_id: str, body: ReleaseReservedStockRequest) -> StockLevelsResponse:
    result = operations.release_reserved_stock(inventory_item_id, **body.model_dump())
    return StockLevelsResponse(**result)


@inventory_router.post("/{inventory_item_id}/alerts/check", response_model=AlertsResponse)
async def check_alerts(inventory_item_id: str, body: CheckAlertsRequest | None = None) -> AlertsResponse:
    alerts = operations.check_alerts(inventory_item_id, as_of=body.as_of if body else None)
    return AlertsResponse(alerts=alerts)


@inventory_router.put("/{inventory_item_id}/deactivate", response_model=StatusResponse)
async def deactivate_item(inventory_item_id: str, body: LifecycleRequest | None = None) -> StatusResponse:
    operations.deactivate_item(inventory_item_id, reason=body.reason if body else None)
    return StatusResponse(status="inactive")


@inventory_router.put("/{inventory_item_id}/reactivate", response_model=StatusResponse)
async def reactivate_item(inventory_item_id: str) -> StatusResponse:
    operations.reactivate_item(inventory_item_id)
    return StatusResponse(status="reactivated")


@inventory_router.put("/{inventory_item_id}/discontinue", response_model=StatusResponse)
async def discontinue_item(inventory_item_id: str, body: LifecycleRequest | None = None) -> StatusResponse:
    operations.discontinue_item(inventory_item_id, reason=body.reason if body else None)
    return StatusResponse(status="discontinued")

"""Pydantic request/response schemas for the Dispatch API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas — orders
# ---------------------------------------------------------------------------
class StopSchema(BaseModel):
    name: str | None = None
    address: str
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    contact_name: str
    contact_phone: str
    contact_email: str | None = None
    window_start: datetime | None = None
    window_end: datetime | None = None
    instructions: str | None = None


class CargoLineSchema(BaseModel):
    name: str
    sku: str | None = None
    quantity: int = Field(ge=1, default=1)
    weight: float = Field(ge=0, default=0.0)
    volume: float = Field(ge=0, default=0.0)
    value: float = Field(ge=0, default=0.0)
    fragile: bool = False


class PricingSchema(BaseModel):
    base_price: float = 0.0
    additional_charges: float = 0.0
    discounts: float = 0.0
    taxes: float = 0.0
    total_amount: float | None = None
    currency: str = "USD"


class CreateOrderRequest(BaseModel):
    customer_id: str
    vendor_id: str | None = None
    order_type: str = "delivery"
    priority: str = "medium"
    pickup: StopSchema
    delivery: StopSchema
    cargo: list[CargoLineSchema]
    pricing: PricingSchema | None = None
    special_instructions: str | None = None
    transit_minutes: int | None = Field(default=None, ge=0)
    created_by: str | None = None


class LocationSchema(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    actor: str | None = None
    notes: str | None = None
    location: LocationSchema | None = None


class CancelOrderRequest(BaseModel):
    reason: str
    actor: str | None = None


class AddNoteRequest(BaseModel):
    text: str
    author: str | None = None
    private: bool = False


class AssignOrderRequest(BaseModel):
    driver_id: str
    vehicle_id: str
    route_id: str | None = None


class ReleaseAssignmentRequest(BaseModel):
    reason: str | None = None


# ---------------------------------------------------------------------------
# Request Schemas — routes and vehicles
# ---------------------------------------------------------------------------
class WaypointSchema(BaseModel):
    sequence: int | None = Field(default=None, ge=1)
    name: str | None = None
    address: str | None = None
    latitude: float
    longitude: float
    waypoint_type: str = "waypoint"
    order_id: str | None = None
    contact_name: str | None = None
    contact_phone: str | None = None
    estimated_arrival: datetime | None = None
    estimated_departure: datetime | None = None
    notes: str | None = None


class CreateRouteRequest(BaseModel):
    name: str
    description: str | None = None
    created_by: str | None = None
    priority: str = "medium"
    planned_start: datetime
    planned_end: datetime
    waypoints: list[WaypointSchema] = []


class UpdateWaypointStatusRequest(BaseModel):
    status: str


class UpdateLocationRequest(BaseModel):
    latitude: float
    longitude: float
    address: str | None = None


class RouteIssueSchema(BaseModel):
    type: str | None = None
    description: str
    severity: str = "low"


class CompleteRouteRequest(BaseModel):
    notes: str | None = None
    issues: list[RouteIssueSchema] = []


class PauseRouteRequest(BaseModel):
    reason: str | None = None


class CancelRouteRequest(BaseModel):
    reason: str


class RegisterVehicleRequest(BaseModel):
    registration_number: str
    vehicle_type: str = "van"
    capacity_weight: float = Field(gt=0)
    capacity_volume: float | None = Field(default=None, ge=0)


class ChangeVehicleStatusRequest(BaseModel):
    status: str
    reason: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class OrderIdResponse(BaseModel):
    order_id: str


class RouteIdResponse(BaseModel):
    route_id: str


class VehicleIdResponse(BaseModel):
    vehicle_id: str


class CancelOrderResponse(BaseModel):
    order_id: str
    refund_amount: float
    vehicle_released: bool


class AssignmentResponse(BaseModel):
    order_id: str
    status: str
    driver_id: str
    vehicle_id: str
    route_id: str | None = None


class ReleaseResponse(BaseModel):
    order_id: str
    released: bool


class StatusEntryResponse(BaseModel):
    status: str
    actor: str | None = None
    notes: str | None = None
    automatic: bool = False
    recorded_at: datetime


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    tracking_number: str
    customer_id: str
    status: str
    delivery_status: str
    driver_id: str | None = None
    vehicle_id: str | None = None
    route_id: str | None = None
    total_weight: float
    total_amount: float
    refund_amount: float | None = None
    estimated_delivery_at: datetime | None = None
    actual_delivery_at: datetime | None = None
    history: list[StatusEntryResponse]


class WaypointResponse(BaseModel):
    waypoint_id: str
    sequence: int
    waypoint_type: str
    status: str
    latitude: float
    longitude: float
    name: str | None = None


class OptimizationResponse(BaseModel):
    total_distance: float
    estimated_duration: float
    estimated_fuel_cost: float
    waypoint_order: list[str]


class CompletionResponse(BaseModel):
    actual_distance: float
    actual_duration: int
    delay_time: int
    fuel_consumed: float


class RouteResponse(BaseModel):
    route_id: str
    name: str
    status: str
    driver_id: str | None = None
    vehicle_id: str | None = None
    progress: int
    waypoints: list[WaypointResponse]
    total_distance: float | None = None
    actual_duration: int | None = None
    delay_time: int | None = None


class VehicleResponse(BaseModel):
    vehicle_id: str
    registration_number: str
    vehicle_type: str
    status: str
    capacity_weight: float
    assigned_driver_id: str | None = None
    current_order_id: str | None = None
    current_route_id: str | None = None
    total_trips: int

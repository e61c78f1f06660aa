"""FastAPI routes for the Dispatch domain — orders, routes and vehicles."""

from fastapi import APIRouter

from dispatch import operations
from dispatch.api.schemas import (
    AddNoteRequest,
    AssignmentResponse,
    AssignOrderRequest,
    CancelOrderRequest,
    CancelOrderResponse,
    CancelRouteRequest,
    ChangeVehicleStatusRequest,
    CompleteRouteRequest,
    CompletionResponse,
    CreateOrderRequest,
    CreateRouteRequest,
    OptimizationResponse,
    OrderIdResponse,
    OrderResponse,
    PauseRouteRequest,
    RegisterVehicleRequest,
    ReleaseAssignmentRequest,
    ReleaseResponse,
    RouteIdResponse,
    RouteResponse,
    StatusEntryResponse,
    StatusResponse,
    UpdateLocationRequest,
    UpdateOrderStatusRequest,
    UpdateWaypointStatusRequest,
    VehicleIdResponse,
    VehicleResponse,
    WaypointResponse,
    WaypointSchema,
)
from dispatch.order.order import Order
from dispatch.route.route import Route
from dispatch.vehicle.vehicle import Vehicle


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        tracking_number=order.tracking_number,
        customer_id=str(order.customer_id),
        status=order.status,
        delivery_status=order.delivery_status(),
        driver_id=order.driver_id,
        vehicle_id=order.vehicle_id,
        route_id=order.route_id,
        total_weight=order.cargo.total_weight,
        total_amount=order.pricing.total_amount,
        refund_amount=order.cancellation.refund_amount if order.cancellation else None,
        estimated_delivery_at=order.estimated_delivery_at,
        actual_delivery_at=order.actual_delivery_at,
        history=[
            StatusEntryResponse(
                status=e.status,
                actor=e.actor,
                notes=e.notes,
                automatic=e.automatic,
                recorded_at=e.recorded_at,
            )
            for e in order.history()
        ],
    )


def _route_response(route: Route) -> RouteResponse:
    return RouteResponse(
        route_id=str(route.id),
        name=route.name,
        status=route.status,
        driver_id=route.driver_id,
        vehicle_id=route.vehicle_id,
        progress=route.progress(),
        waypoints=[
            WaypointResponse(
                waypoint_id=str(w.id),
                sequence=w.sequence,
                waypoint_type=w.waypoint_type,
                status=w.status,
                latitude=w.latitude,
                longitude=w.longitude,
                name=w.name,
            )
            for w in route.ordered_waypoints()
        ],
        total_distance=route.optimization.total_distance if route.optimization else None,
        actual_duration=route.metrics.actual_duration if route.metrics else None,
        delay_time=route.metrics.delay_time if route.metrics else None,
    )


def _vehicle_response(vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse(
        vehicle_id=str(vehicle.id),
        registration_number=vehicle.registration_number,
        vehicle_type=vehicle.vehicle_type,
        status=vehicle.status,
        capacity_weight=vehicle.capacity.weight,
        assigned_driver_id=vehicle.assigned_driver_id,
        current_order_id=vehicle.current_order_id,
        current_route_id=vehicle.current_route_id,
        total_trips=vehicle.metrics.total_trips if vehicle.metrics else 0,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def create_order(body: CreateOrderRequest) -> OrderIdResponse:
    order_id = operations.create_order(body.model_dump(exclude_none=True))
    return OrderIdResponse(order_id=order_id)


@order_router.get("/track/{reference}", response_model=OrderResponse)
async def track_order(reference: str) -> OrderResponse:
    return _order_response(operations.track_order(reference))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return _order_response(operations.get_order(order_id))


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    new_status = operations.update_order_status(
        order_id,
        body.status,
        actor=body.actor,
        notes=body.notes,
        location=body.location.model_dump() if body.location else None,
    )
    return StatusResponse(status=new_status)


@order_router.put("/{order_id}/cancel", response_model=CancelOrderResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> CancelOrderResponse:
    return CancelOrderResponse(**operations.cancel_order(order_id, body.reason, actor=body.actor))


@order_router.post("/{order_id}/notes", status_code=201, response_model=StatusResponse)
async def add_note(order_id: str, body: AddNoteRequest) -> StatusResponse:
    operations.add_note(order_id, body.text, author=body.author, private=body.private)
    return StatusResponse()


@order_router.put("/{order_id}/assign", response_model=AssignmentResponse)
async def assign_order(order_id: str, body: AssignOrderRequest) -> AssignmentResponse:
    result = operations.assign_order(order_id, body.driver_id, body.vehicle_id, route_id=body.route_id)
    return AssignmentResponse(**result)


@order_router.put("/{order_id}/release", response_model=ReleaseResponse)
async def release_assignment(order_id: str, body: ReleaseAssignmentRequest | None = None) -> ReleaseResponse:
    result = operations.release_assignment(order_id, reason=body.reason if body else None)
    return ReleaseResponse(**result)


# ---------------------------------------------------------------------------
# Route Router
# ---------------------------------------------------------------------------
route_router = APIRouter(prefix="/routes", tags=["routes"])


@route_router.post("", status_code=201, response_model=RouteIdResponse)
async def create_route(body: CreateRouteRequest) -> RouteIdResponse:
    data = body.model_dump(exclude_none=True)
    data["waypoints"] = [w.model_dump(exclude_none=True) for w in body.waypoints]
    return RouteIdResponse(route_id=operations.create_route(data))


@route_router.get("/{route_id}", response_model=RouteResponse)
async def get_route(route_id: str) -> RouteResponse:
    return _route_response(operations.get_route(route_id))


@route_router.post("/{route_id}/waypoints", status_code=201)
async def add_waypoint(route_id: str, body: WaypointSchema) -> dict:
    return operations.add_waypoint(route_id, body.model_dump(exclude_none=True))


@route_router.put("/{route_id}/waypoints/{waypoint_id}/status")
async def update_waypoint_status(route_id: str, waypoint_id: str, body: UpdateWaypointStatusRequest) -> dict:
    return operations.update_waypoint_status(route_id, waypoint_id, body.status)


@route_router.put("/{route_id}/plan", response_model=StatusResponse)
async def plan_route(route_id: str) -> StatusResponse:
    operations.plan_route(route_id)
    return StatusResponse(status="planned")


@route_router.post("/{route_id}/optimize", response_model=OptimizationResponse)
async def optimize_route(route_id: str) -> OptimizationResponse:
    return OptimizationResponse(**operations.optimize_route(route_id))


@route_router.put("/{route_id}/start", response_model=StatusResponse)
async def start_route(route_id: str) -> StatusResponse:
    operations.start_route(route_id)
    return StatusResponse(status="in-progress")


@route_router.put("/{route_id}/location", response_model=StatusResponse)
async def update_route_location(route_id: str, body: UpdateLocationRequest) -> StatusResponse:
    operations.update_route_location(route_id, body.latitude, body.longitude, address=body.address)
    return StatusResponse()


@route_router.put("/{route_id}/complete", response_model=CompletionResponse)
async def complete_route(route_id: str, body: CompleteRouteRequest | None = None) -> CompletionResponse:
    body = body or CompleteRouteRequest()
    result = operations.complete_route(route_id, notes=body.notes, issues=[i.model_dump() for i in body.issues])
    return CompletionResponse(**result)


@route_router.put("/{route_id}/pause", response_model=StatusResponse)
async def pause_route(route_id: str, body: PauseRouteRequest | None = None) -> StatusResponse:
    operations.pause_route(route_id, reason=body.reason if body else None)
    return StatusResponse(status="paused")


@route_router.put("/{route_id}/resume", response_model=StatusResponse)
async def resume_route(route_id: str) -> StatusResponse:
    return StatusResponse(status=operations.resume_route(route_id))


@route_router.put("/{route_id}/cancel", response_model=StatusResponse)
async def cancel_route(route_id: str, body: CancelRouteRequest) -> StatusResponse:
    operations.cancel_route(route_id, body.reason)
    return StatusResponse(status="cancelled")


# ---------------------------------------------------------------------------
# Vehicle Router
# ---------------------------------------------------------------------------
vehicle_router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@vehicle_router.post("", status_code=201, response_model=VehicleIdResponse)
async def register_vehicle(body: RegisterVehicleRequest) -> VehicleIdResponse:
    vehicle_id = operations.register_vehicle(
        body.registration_number,
        body.capacity_weight,
        capacity_volume=body.capacity_volume,
        vehicle_type=body.vehicle_type,
    )
    return VehicleIdResponse(vehicle_id=vehicle_id)


@vehicle_router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(vehicle_id: str) -> VehicleResponse:
    return _vehicle_response(operations.get_vehicle(vehicle_id))


@vehicle_router.put("/{vehicle_id}/status", response_model=StatusResponse)
async def change_vehicle_status(vehicle_id: str, body: ChangeVehicleStatusRequest) -> StatusResponse:
    operations.change_vehicle_status(vehicle_id, body.status, reason=body.reason)
    return StatusResponse(status=body.status)

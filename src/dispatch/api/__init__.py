from dispatch.api.routes import order_router, route_router, vehicle_router

__all__ = ["order_router", "route_router", "vehicle_router"]

"""Repository for the Order aggregate."""

from dispatch.domain import dispatch

from .order import Order


@dispatch.repository(part_of=Order)
class OrderRepository:
    """Order lookups by the customer-facing numbers."""

    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def find_by_tracking_number(self, tracking_number: str) -> Order | None:
        return self._dao.query.filter(tracking_number=tracking_number).all().first

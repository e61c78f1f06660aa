"""Order lookup by id, order number or tracking number."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.errors import NotFound

from dispatch.order.order import Order


def track_order(reference: str) -> Order:
    """Find an order by its id, tracking number or order number."""
    repo = current_domain.repository_for(Order)
    reference = str(reference).strip()
    try:
        return repo.get(reference)
    except ObjectNotFoundError:
        pass

    found = repo.find_by_tracking_number(reference.upper()) or repo.find_by_order_number(reference.upper())
    if found is not None:
        return found
    raise NotFound({"order": [f"No order matches {reference}"]})

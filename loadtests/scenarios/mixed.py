"""Mixed dispatch workload scenario.

Combines journeys from both bounded contexts with weights that model a
working day at a regional depot. This is the recommended scenario for load
baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.inventory import ReceiveAndIssueJourney, ReservationJourney
from loadtests.scenarios.orders import (
    OrderCancellationJourney,
    OrderDeliveryJourney,
    OrderProgressJourney,
)
from loadtests.scenarios.routes import (
    RouteInterruptionJourney,
    RoutePlanningJourney,
    VehicleMaintenanceJourney,
)


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload across dispatch and inventory.

    Orders (45%):
    - Order progress: dispatcher intake, most common write path
    - Delivery through to completion
    - Cancellations: unhappy path

    Routes and vehicles (30%):
    - Route planning with repeated optimization
    - Route interruptions
    - Vehicle maintenance

    Inventory (25%):
    - Receiving and issuing stock
    - Reservation lifecycle
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        # Orders (45%)
        OrderProgressJourney: 5,
        OrderDeliveryJourney: 2,
        OrderCancellationJourney: 2,
        # Routes and vehicles (30%)
        RoutePlanningJourney: 3,
        RouteInterruptionJourney: 1,
        VehicleMaintenanceJourney: 2,
        # Inventory (25%)
        ReceiveAndIssueJourney: 3,
        ReservationJourney: 2,
    }

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def inventory_bed():
    from inventory.domain import inventory

    bed = DomainFixture(inventory)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(inventory_bed):
    with inventory_bed.domain_context():
        yield


@pytest.fixture()
def register():
    """Register an item through the ledger's public surface; returns its id."""
    from inventory import operations

    def _register(sku="BOLT-M8", name="M8 hex bolt", **overrides):
        return operations.register_item(sku, name, **overrides)

    return _register

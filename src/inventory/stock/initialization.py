"""Item registration — command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Date, Integer, String, Text
from protean.utils.globals import current_domain

from inventory import config
from inventory.domain import inventory
from inventory.stock.stock import InventoryItem


@inventory.command(part_of="InventoryItem")
class RegisterItem:
    """Register a new SKU in the ledger, optionally with opening stock."""

    sku = String(required=True, max_length=50)
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    category = String(max_length=100)
    unit = String(max_length=20)
    location = String(max_length=100)
    opening_quantity = Integer(default=0)
    reorder_point = Integer(default=config.DEFAULT_REORDER_POINT)
    minimum = Integer(default=0)
    maximum = Integer()
    expires_on = Date()
    alert_settings = Text()  # JSON dict of AlertSettings fields
    actor = String(max_length=100)


@inventory.command_handler(part_of=InventoryItem)
class RegisterItemHandler:
    @handle(RegisterItem)
    def register_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        sku = command.sku.strip().upper()
        if repo.find_by_sku(sku) is not None:
            raise ValidationError({"sku": [f"SKU {sku} is already registered"]})

        settings = command.alert_settings
        if isinstance(settings, str):
            settings = json.loads(settings)

        details = {
            key: getattr(command, key)
            for key in ("description", "category", "unit", "location", "expires_on")
            if getattr(command, key) is not None
        }
        item = InventoryItem.create(
            sku=sku,
            name=command.name,
            opening_quantity=command.opening_quantity or 0,
            reorder_point=command.reorder_point if command.reorder_point is not None else config.DEFAULT_REORDER_POINT,
            minimum=command.minimum or 0,
            maximum=command.maximum,
            actor=command.actor,
            alert_settings=settings,
            **details,
        )
        repo.add(item)
        return str(item.id)

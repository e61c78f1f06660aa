"""Internal order notes — command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.order.order import Order


@dispatch.command(part_of="Order")
class AddOrderNote:
    order_id = Identifier(required=True)
    text = String(required=True, max_length=2000)
    author = String(max_length=100)
    private = Boolean(default=False)


@dispatch.command_handler(part_of=Order)
class OrderNoteHandler:
    @handle(AddOrderNote)
    def add_note(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.add_note(command.text, author=command.author, private=command.private)
        repo.add(order)

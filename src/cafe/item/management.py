"""Catalog management: commands and handler.

Item names are unique across the catalog. Updates overwrite stock, so they
hold the item key for the whole unit of work, as fulfillment does.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from cafe.domain import cafe, logger
from cafe.errors import DuplicateItemName
from cafe.item.item import Item
from cafe.locks import cafe_locks, item_key


@cafe.command(part_of="Item")
class AddItem:
    name = String(required=True, max_length=100)
    description = Text()
    price = Float(required=True)
    amount = Integer(default=0)


@cafe.command(part_of="Item")
class UpdateItem:
    item_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = Text()
    price = Float(required=True)
    amount = Integer(required=True)


@cafe.command(part_of="Item")
class RemoveItem:
    item_id = Identifier(required=True)


@cafe.command_handler(part_of=Item)
class ManageItemHandler:
    @handle(AddItem)
    def add_item(self, command):
        repo = current_domain.repository_for(Item)

        name = command.name.strip()
        if repo.find_by_name(name) is not None:
            raise DuplicateItemName(name)

        item = Item.create(
            name=name,
            price=command.price,
            amount=command.amount if command.amount is not None else 0,
            description=command.description,
        )
        repo.add(item)

        logger.info("item_added", item_id=str(item.id), name=item.name, price=item.price, amount=item.amount)
        return str(item.id)

    @handle(UpdateItem)
    def update_item(self, command):
        repo = current_domain.repository_for(Item)
        item = repo.find_item(command.item_id)

        name = command.name.strip()
        existing = repo.find_by_name(name)
        if existing is not None and str(existing.id) != str(item.id):
            raise DuplicateItemName(name)

        item.update_details(
            name=name,
            price=command.price,
            amount=command.amount,
            description=command.description,
        )
        repo.add(item)

        logger.info("item_updated", item_id=str(item.id), name=item.name, price=item.price, amount=item.amount)
        return str(item.id)

    @handle(RemoveItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(Item)
        item = repo.find_item(command.item_id)
        repo.delete_item(item)

        logger.info("item_removed", item_id=str(item.id), name=item.name)
        return str(item.id)


def add_item(name, price, amount=0, description=None) -> Item:
    item_id = current_domain.process(
        AddItem(name=name, price=price, amount=amount, description=description),
        asynchronous=False,
    )
    return current_domain.repository_for(Item).find_item(item_id)


def update_item(item_id, name, price, amount, description=None) -> Item:
    with cafe_locks.hold([item_key(item_id)]):
        current_domain.process(
            UpdateItem(item_id=item_id, name=name, price=price, amount=amount, description=description),
            asynchronous=False,
        )
    return current_domain.repository_for(Item).find_item(item_id)


def remove_item(item_id) -> None:
    with cafe_locks.hold([item_key(item_id)]):
        current_domain.process(RemoveItem(item_id=item_id), asynchronous=False)


def get_item(item_id) -> Item:
    return current_domain.repository_for(Item).find_item(item_id)


def list_items() -> list[Item]:
    return current_domain.repository_for(Item).list_items()

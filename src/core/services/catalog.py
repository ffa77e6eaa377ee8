"""
Maestros: sucursales e items.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from core import errors
from core.models import Branch, Item, ItemType
from core.utils.parsing import parse_bool, parse_decimal

logger = logging.getLogger(__name__)


def get_branch(name, lock=False) -> Branch:
    """
    lock=True toma la fila de la sucursal con select_for_update: serializa
    el arqueo contra las ventas y cierres del mismo local.
    """
    if not name:
        raise errors.ValidationError("branch is required")
    qs = Branch.objects.select_for_update() if lock else Branch.objects
    try:
        return qs.get(name=name)
    except Branch.DoesNotExist:
        raise errors.NotFoundError(f"Branch not found: {name}")


def get_item(code, item_type=None) -> Item:
    if not code:
        raise errors.ValidationError("itemCode is required")
    try:
        item = Item.objects.get(code=code)
    except Item.DoesNotExist:
        raise errors.NotFoundError(f"Item not found: {code}")
    if item_type and item.item_type != item_type:
        raise errors.ValidationError(f"Item {code} is not a {item_type}")
    return item


# ---------------------------
# Sucursales
# ---------------------------

def create_branch(data) -> Branch:
    name = (data.get("name") or "").strip()
    address = (data.get("address") or "").strip()
    manager = (data.get("manager") or "").strip()
    if not name or not address or not manager:
        raise errors.ValidationError("Name, address, and manager are required")

    if Branch.objects.filter(name=name).exists():
        raise errors.ConflictError("Branch already exists")

    try:
        with transaction.atomic():
            branch = Branch.objects.create(
                name=name,
                address=address,
                manager=manager,
                phone=(data.get("phone") or "").strip(),
                email=(data.get("email") or "").strip(),
            )
    except IntegrityError:
        raise errors.ConflictError("Branch already exists")

    logger.info("Sucursal creada: %s", name)
    return branch


def update_branch(current_name, data) -> Branch:
    branch = get_branch(current_name)
    name = (data.get("name") or branch.name).strip()
    address = (data.get("address") or "").strip()
    manager = (data.get("manager") or "").strip()
    if not name or not address or not manager:
        raise errors.ValidationError("Name, address, and manager are required")

    if name != branch.name and Branch.objects.filter(name=name).exists():
        raise errors.ConflictError("Branch name already exists")

    branch.name = name
    branch.address = address
    branch.manager = manager
    branch.phone = (data.get("phone") or "").strip()
    branch.email = (data.get("email") or "").strip()
    branch.save()
    logger.info("Sucursal actualizada: %s -> %s", current_name, name)
    return branch


def delete_branch(name):
    branch = get_branch(name)
    in_use = (
        branch.stock_entries.exists()
        or branch.grocery_batches.exists()
        or branch.cash_entries.exists()
        or branch.machine_batches.exists()
    )
    if in_use:
        raise errors.ConflictError("Cannot delete branch with recorded stock or cash entries")
    try:
        branch.delete()
    except ProtectedError:
        raise errors.ConflictError("Cannot delete branch with recorded transactions")
    logger.info("Sucursal eliminada: %s", name)


# ---------------------------
# Items
# ---------------------------

def _check_machine_name(name, exclude_code=None):
    qs = Item.objects.filter(item_type=ItemType.MACHINE, name__iexact=name)
    if exclude_code:
        qs = qs.exclude(code=exclude_code)
    if qs.exists():
        raise errors.ConflictError("Machine with this name already exists")


def create_item(data) -> Item:
    item_type = data.get("itemType")
    name = (data.get("name") or "").strip()
    category = (data.get("category") or "").strip()
    price = parse_decimal(data.get("price"), field="price", required=False)

    if item_type == ItemType.MACHINE and not category:
        category = Item.MACHINE_CATEGORY
    if not item_type or not name or not category or price is None:
        raise errors.ValidationError("Required fields missing")
    if item_type not in ItemType.values:
        raise errors.ValidationError(f"Invalid itemType: {item_type}")
    if price < 0:
        raise errors.ValidationError("Price cannot be negative")

    subcategory = (data.get("subcategory") or "").strip()
    if item_type == ItemType.MACHINE:
        _check_machine_name(name)
        category = Item.MACHINE_CATEGORY
        subcategory = subcategory or Item.MACHINE_SUBCATEGORY

    item = Item.objects.create(
        code=Item.generate_code(),
        item_type=item_type,
        name=name,
        category=category,
        subcategory=subcategory,
        price=price,
        description=(data.get("description") or "").strip(),
        sold_by_weight=parse_bool(data.get("soldByWeight")),
        notify_expiry=parse_bool(data.get("notifyExpiry")),
    )
    logger.info("Item creado: %s (%s)", item.code, item.name)
    return item


def update_item(code, data) -> Item:
    item = get_item(code)
    name = (data.get("name") or "").strip()
    price = parse_decimal(data.get("price"), field="price", required=False)
    if not name or price is None:
        raise errors.ValidationError("Required fields missing")
    if price < 0:
        raise errors.ValidationError("Price cannot be negative")

    if item.is_machine:
        _check_machine_name(name, exclude_code=item.code)
        category = Item.MACHINE_CATEGORY
        subcategory = Item.MACHINE_SUBCATEGORY
    else:
        category = (data.get("category") or "").strip()
        if not category:
            raise errors.ValidationError("Category is required")
        subcategory = (data.get("subcategory") or "").strip()

    item.name = name
    item.category = category
    item.subcategory = subcategory
    item.price = price
    item.description = (data.get("description") or "").strip()
    item.sold_by_weight = parse_bool(data.get("soldByWeight"))
    item.notify_expiry = parse_bool(data.get("notifyExpiry"))
    item.save()
    logger.info("Item actualizado: %s", item.code)
    return item


def delete_item(code):
    item = get_item(code)
    in_use = (
        item.stock_entries.exists()
        or item.grocery_batches.exists()
        or item.machine_batches.exists()
    )
    if in_use:
        raise errors.ConflictError("Cannot delete item with existing stock")
    try:
        item.delete()
    except ProtectedError:
        raise errors.ConflictError("Cannot delete item with existing stock")
    logger.info("Item eliminado: %s", code)

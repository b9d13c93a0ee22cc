"""
Stock bookkeeping shared by the movement journals.

Movements only ever touch the good-condition quantity: ``qty_baik`` and
``available_qty`` move together, ``qty_real`` is left alone until the
next manual count.
"""
import logging

from django.db import transaction

from .models import InventoryItem

logger = logging.getLogger(__name__)


class StockError(Exception):
    """Base class for stock changes that cannot be applied"""


class PartNotFound(StockError):
    def __init__(self, part):
        self.part = part
        super().__init__(f"Part {part} was not found in Report Stock.")


class InsufficientStock(StockError):
    def __init__(self, part, available, requested):
        self.part = part
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient good stock for part {part} (available {available}, requested {requested})."
        )


def find_item(part):
    """Case-insensitive lookup of an inventory item by part number"""
    if not part:
        return None
    return InventoryItem.objects.filter(part__iexact=part.strip()).first()


def adjust_good_stock(part, delta):
    """
    Apply ``delta`` to the good stock of ``part`` and return the updated item.

    The row is locked for the duration of the surrounding transaction.
    Raises PartNotFound or InsufficientStock; nothing is written then.
    """
    with transaction.atomic():
        item = InventoryItem.objects.select_for_update().filter(part=part).first()
        if item is None:
            logger.warning(f"Stock change rejected: part {part} not found")
            raise PartNotFound(part)

        new_qty_baik = item.qty_baik + delta
        if new_qty_baik < 0:
            logger.warning(f"Stock change rejected: part {part} has {item.qty_baik} good, change {delta}")
            raise InsufficientStock(part, item.qty_baik, -delta)

        item.qty_baik = new_qty_baik
        item.available_qty = item.available_qty + delta
        item.save(update_fields=['qty_baik', 'available_qty', 'updated_at'])
        logger.info(f"Stock for {part} changed by {delta}: qty_baik={item.qty_baik}, available_qty={item.available_qty}")
        return item

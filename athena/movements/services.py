"""
Stock effect of movement status changes.

A record's quantity is reflected in Report Stock exactly while
``stock_updated`` is set. Moving into one of the model's
``STOCK_STATUSES`` applies the quantity, moving out of them reverts it,
and moves within the same side leave the stock alone.
"""
import logging
import time

from django.db import transaction

from athena.core.permissions import has_permission, is_admin, ROLE_TEKNISI
from athena.inventory.services import adjust_good_stock, find_item

logger = logging.getLogger(__name__)


def generate_pds_transaction_number():
    """Bon PDS transaction numbers: TRX-PDS-<epoch milliseconds>"""
    return f"TRX-PDS-{int(time.time() * 1000)}"


def resolve_part(part):
    """
    Match ``part`` against Report Stock case-insensitively.

    Returns ``(part, item)``: the stored spelling and the item when one
    exists, otherwise the trimmed input and None.
    """
    part = (part or '').strip()
    item = find_item(part)
    if item is not None:
        return item.part, item
    return part, None


def apply_status_change(record, new_status):
    """
    Update Report Stock for ``record`` moving to ``new_status``.

    Sets ``record.stock_updated`` but does not save the record; callers
    save it inside the same transaction. Raises StockError subclasses.
    """
    counts_after = new_status in record.STOCK_STATUSES
    if counts_after == record.stock_updated:
        return None

    sign = record.STOCK_DIRECTION if counts_after else -record.STOCK_DIRECTION
    delta = sign * record.quantity
    with transaction.atomic():
        item = adjust_good_stock(record.part, delta)
    record.stock_updated = counts_after
    logger.info(
        f"{record._meta.model_name} {record.pk}: {record.status} -> {new_status}, "
        f"stock {record.part} {delta:+d}"
    )
    return item


def is_technician_only(user):
    """Technicians without admin rights are limited to their own daily bons"""
    return bool(user and user.is_authenticated and user.role == ROLE_TEKNISI and not is_admin(user))


def technician_name(user):
    return user.nama_teknisi or user.username


def can_edit_record(user, record, feature):
    """Edit flag plus the lock on RECEIVED/CANCELED records, which only admins bypass"""
    if not has_permission(user, feature, 'edit'):
        return False
    return is_admin(user) or not record.is_locked


def can_delete_record(user, record, feature):
    return has_permission(user, feature, 'delete')

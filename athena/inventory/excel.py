"""
Excel import/export of the Report Stock sheet (openpyxl).
"""
import io
import logging
from decimal import Decimal, InvalidOperation

import openpyxl
from openpyxl.styles import Font, PatternFill
from django.db import transaction

from athena.core.cache_signals import suspend_cache_signals, invalidate_dashboard_cache
from .models import InventoryItem

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    'part', 'deskripsi', 'harga_dpp', 'ppn', 'total_harga', 'satuan',
    'available_qty', 'qty_baik', 'qty_rusak', 'lokasi', 'return_to_factory', 'qty_real',
]

SHEET_TITLE = 'Report Stock'
EXPORT_FILENAME = 'report_stock.xlsx'


class ImportFormatError(ValueError):
    """The uploaded workbook does not look like a Report Stock sheet"""


# Largest value an IntegerField holds on every supported database
MAX_QUANTITY = 2147483647


def _to_decimal(value):
    """Numeric cell as a finite Decimal; blanks, text and inf/nan count as 0"""
    if value is None or value == '':
        return Decimal('0')
    try:
        number = Decimal(str(value).strip().replace(',', ''))
    except (InvalidOperation, ValueError):
        return Decimal('0')
    if not number.is_finite():
        return Decimal('0')
    return number


def _to_quantity(value, part, column):
    quantity = max(int(_to_decimal(value)), 0)
    if quantity > MAX_QUANTITY:
        raise ImportFormatError(f"Part {part}: {column} value {value} is out of range.")
    return quantity


def _to_text(value, default=''):
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _return_to_factory(value):
    """Accept YES/NO, booleans or a numeric flag"""
    text = _to_text(value).upper()
    if text in ('YES', 'Y', 'TRUE'):
        return 'YES'
    if text in ('', 'NO', 'N', 'FALSE'):
        return 'NO'
    return 'YES' if _to_decimal(text) > 0 else 'NO'


def read_rows(file_obj):
    """Yield each data row of the first sheet as a dict keyed by lower-cased header"""
    try:
        workbook = openpyxl.load_workbook(file_obj, read_only=True, data_only=True)
    except Exception as e:
        raise ImportFormatError(f"Unable to read Excel file: {e}")

    try:
        worksheet = workbook.worksheets[0]
        rows = worksheet.iter_rows(values_only=True)
        header = next(rows, None)
        if not header:
            return
        columns = [_to_text(cell).lower() for cell in header]
        if 'part' not in columns:
            raise ImportFormatError("Invalid Excel format. Make sure the sheet has a 'part' column.")
        for values in rows:
            if values is None or all(v is None for v in values):
                continue
            yield dict(zip(columns, values))
    finally:
        workbook.close()


def import_inventory(file_obj):
    """
    Upsert inventory items from an uploaded workbook.

    Returns the number of rows imported. Quantities are recounted:
    available and real quantity are good + damaged.
    """
    imported = 0
    with transaction.atomic(), suspend_cache_signals():
        for row in read_rows(file_obj):
            part = _to_text(row.get('part'))
            if not part:
                continue
            qty_baik = _to_quantity(row.get('qty_baik'), part, 'qty_baik')
            qty_rusak = _to_quantity(row.get('qty_rusak'), part, 'qty_rusak')
            if qty_baik + qty_rusak > MAX_QUANTITY:
                raise ImportFormatError(f"Part {part}: total quantity is out of range.")
            values = {
                'deskripsi': _to_text(row.get('deskripsi')),
                'harga_dpp': _to_decimal(row.get('harga_dpp')),
                'ppn': _to_decimal(row.get('ppn')),
                'total_harga': _to_decimal(row.get('total_harga')),
                'satuan': _to_text(row.get('satuan'), 'pcs'),
                'qty_baik': qty_baik,
                'qty_rusak': qty_rusak,
                'available_qty': qty_baik + qty_rusak,
                'qty_real': qty_baik + qty_rusak,
                'lokasi': _to_text(row.get('lokasi')),
                'return_to_factory': _return_to_factory(row.get('return_to_factory')),
            }
            # Existing parts keep their stored spelling
            item = InventoryItem.objects.filter(part__iexact=part).first() or InventoryItem(part=part)
            for field, value in values.items():
                setattr(item, field, value)
            item.save()
            imported += 1
    invalidate_dashboard_cache()
    logger.info(f"Imported {imported} inventory rows")
    return imported


def export_inventory(queryset=None):
    """Render inventory items to an .xlsx workbook and return its bytes"""
    if queryset is None:
        queryset = InventoryItem.objects.all()

    workbook = openpyxl.Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE

    worksheet.append(EXPORT_COLUMNS)
    header_fill = PatternFill(start_color='366092', end_color='366092', fill_type='solid')
    for cell in worksheet[1]:
        cell.font = Font(bold=True, color='FFFFFF')
        cell.fill = header_fill

    for item in queryset.order_by('part'):
        row = []
        for column in EXPORT_COLUMNS:
            value = getattr(item, column)
            if isinstance(value, Decimal):
                value = float(value)
            row.append(value)
        worksheet.append(row)

    for column_cells in worksheet.columns:
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
        worksheet.column_dimensions[column_cells[0].column_letter].width = min(width + 2, 50)

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()

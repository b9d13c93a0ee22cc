"""
Management command to load the Report Stock from an Excel workbook
"""
import os

from django.core.management.base import BaseCommand, CommandError

from athena.inventory.excel import ImportFormatError, import_inventory


class Command(BaseCommand):
    help = "Imports Report Stock rows (upsert by part) from the first sheet of an .xlsx file"

    def add_arguments(self, parser):
        parser.add_argument('file', type=str, help='Path to the .xlsx workbook')

    def handle(self, *args, **options):
        path = options['file']
        if not os.path.exists(path):
            raise CommandError(f"File not found: {path}")

        self.stdout.write(f"Importing Report Stock from {path}")
        try:
            with open(path, 'rb') as f:
                imported = import_inventory(f)
        except ImportFormatError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(f"Imported {imported} rows."))

from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("part", models.CharField(max_length=100, unique=True)),
                ("deskripsi", models.CharField(blank=True, max_length=255)),
                ("harga_dpp", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("ppn", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_harga", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("satuan", models.CharField(default="pcs", max_length=20)),
                ("available_qty", models.IntegerField(default=0)),
                ("qty_baik", models.IntegerField(default=0, help_text="Good-condition quantity")),
                ("qty_rusak", models.IntegerField(default=0, help_text="Damaged quantity")),
                ("lokasi", models.CharField(blank=True, max_length=100)),
                ("return_to_factory", models.CharField(choices=[("YES", "Yes"), ("NO", "No")], default="NO", max_length=3)),
                ("qty_real", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "inventory_items",
                "ordering": ["part"],
                "indexes": [models.Index(fields=["deskripsi"], name="idx_inventory_deskripsi")],
            },
        ),
    ]

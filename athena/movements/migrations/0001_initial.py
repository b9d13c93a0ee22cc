import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DailyBon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("part", models.CharField(max_length=100)),
                ("deskripsi", models.CharField(blank=True, max_length=255)),
                ("keterangan", models.TextField(blank=True)),
                ("stock_updated", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("qty_dailybon", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("harga", models.DecimalField(decimal_places=2, default=0, max_digits=14)),
                ("status_bon", models.CharField(choices=[("BON", "Bon"), ("RECEIVED", "Received"), ("KMP", "KMP"), ("CANCELED", "Canceled")], default="BON", max_length=10)),
                ("teknisi", models.CharField(max_length=150)),
                ("tanggal_dailybon", models.DateField()),
                ("no_tkl", models.CharField(blank=True, max_length=100)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "daily_bons",
                "ordering": ["-tanggal_dailybon", "-created_at"],
                "indexes": [
                    models.Index(fields=["teknisi"], name="idx_dailybon_teknisi"),
                    models.Index(fields=["status_bon"], name="idx_dailybon_status"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BonPds",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("part", models.CharField(max_length=100)),
                ("deskripsi", models.CharField(blank=True, max_length=255)),
                ("keterangan", models.TextField(blank=True)),
                ("stock_updated", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("qty_bonpds", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("status_bonpds", models.CharField(choices=[("BON", "Bon"), ("RECEIVED", "Received"), ("CANCELED", "Canceled")], default="BON", max_length=10)),
                ("site_bonpds", models.CharField(max_length=150)),
                ("tanggal_bonpds", models.DateField()),
                ("no_transaksi", models.CharField(max_length=100)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Bon PDS",
                "verbose_name_plural": "Bon PDS",
                "db_table": "bon_pds",
                "ordering": ["-tanggal_bonpds", "-created_at"],
                "indexes": [models.Index(fields=["status_bonpds"], name="idx_bonpds_status")],
            },
        ),
        migrations.CreateModel(
            name="Msk",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("part", models.CharField(max_length=100)),
                ("deskripsi", models.CharField(blank=True, max_length=255)),
                ("keterangan", models.TextField(blank=True)),
                ("stock_updated", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("qty_msk", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("status_msk", models.CharField(choices=[("BON", "Bon"), ("RECEIVED", "Received"), ("CANCELED", "Canceled")], default="BON", max_length=10)),
                ("site_msk", models.CharField(max_length=150)),
                ("tanggal_msk", models.DateField()),
                ("no_transaksi", models.CharField(max_length=100)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "MSK",
                "verbose_name_plural": "MSK",
                "db_table": "msk",
                "ordering": ["-tanggal_msk", "-created_at"],
                "indexes": [
                    models.Index(fields=["status_msk"], name="idx_msk_status"),
                    models.Index(fields=["no_transaksi"], name="idx_msk_no_transaksi"),
                ],
            },
        ),
    ]

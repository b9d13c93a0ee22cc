from django.db import migrations, models


def register_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("name", models.CharField(max_length=255)),
        ("keterangan", models.TextField(blank=True)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Nr",
            fields=register_fields(),
            options={
                "verbose_name": "NR",
                "verbose_name_plural": "NR",
                "db_table": "register_nr",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Tsn",
            fields=register_fields(),
            options={
                "verbose_name": "TSN",
                "verbose_name_plural": "TSN",
                "db_table": "register_tsn",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Tsp",
            fields=register_fields(),
            options={
                "verbose_name": "TSP",
                "verbose_name_plural": "TSP",
                "db_table": "register_tsp",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Sob",
            fields=register_fields(),
            options={
                "verbose_name": "SOB",
                "verbose_name_plural": "SOB",
                "db_table": "register_sob",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
    ]

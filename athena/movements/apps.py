from django.apps import AppConfig


class MovementsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'athena.movements'
    label = 'movements'
    verbose_name = 'Stock Movements'

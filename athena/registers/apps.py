from django.apps import AppConfig


class RegistersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'athena.registers'
    label = 'registers'

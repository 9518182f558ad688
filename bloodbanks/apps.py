from django.apps import AppConfig


class BloodBanksConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'bloodbanks'

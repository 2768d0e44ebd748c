from django.apps import AppConfig


class CoreConfig(AppConfig):
    """
    Configuration for Core application

    This app contains:
        - Error taxonomy and the middleware rendering it as JSON
        - Dashboard statistics (per-role counts)
        - Dashboard view

    It has no models of its own.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'

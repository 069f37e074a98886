from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'stockroom.core'

    def ready(self):
        from . import cache_signals  # noqa: F401

from django.apps import AppConfig

from .module import MODULE_ID, MODULE_NAME


class LechonConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = MODULE_ID
    verbose_name = MODULE_NAME

    def ready(self):
        from . import signals  # noqa

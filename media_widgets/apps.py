from django.apps import AppConfig


class MediaWidgetsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "media_widgets"
    verbose_name = "Media widgets"

    def ready(self):
        from core.plugins import registry
        from .plugin import MediaWidgetsPlugin
        registry.register(MediaWidgetsPlugin())

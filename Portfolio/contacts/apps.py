from django.apps import AppConfig


class ContactsConfig(AppConfig):
    name = 'contacts'
    default_auto_field = 'django.db.models.BigAutoField'
    pipeline = None

    def ready(self):
        from .services import build_pipeline
        self.pipeline = build_pipeline()

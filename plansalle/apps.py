# plansalle/apps.py
from django.apps import AppConfig


class PlansalleConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "plansalle"

    def ready(self):
        from .regles import enregistrement  # noqa: F401

import os
from celery import Celery

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.environ.get("DJANGO_SETTINGS_MODULE", "planificateur.settings.dev")
)

app = Celery("planificateur")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

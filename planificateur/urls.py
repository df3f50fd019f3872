# comments in French
from __future__ import annotations

from django.http import HttpResponse
from django.urls import include, path


def healthz(_request) -> HttpResponse:
    """endpoint très simple pour les sondes de liveness."""
    return HttpResponse("ok", content_type="text/plain")


urlpatterns = [
    # planificateur de plans de salle (JSON + tâches Celery)
    path("plansalle/", include(("plansalle.urls", "plansalle"), namespace="plansalle")),
    path("healthz", healthz),
]

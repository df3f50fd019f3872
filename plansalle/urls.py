from django.urls import path
from . import views

app_name = "plansalle"

urlpatterns = [
    # Petite sonde de santé (pratique pour Nginx / monitoring)
    path("sante", views.sante, name="sante"),

    # === Opérations synchrones (document JSON en entrée) ================================
    path("score", views.score, name="ps_score"),
    path("initial", views.affectation_initiale, name="ps_initial"),
    path("reparer", views.reparer, name="ps_reparer"),
    path("case", views.case, name="ps_case"),
    path("redimensionner", views.redimensionner, name="ps_redimensionner"),

    # === Recuit asynchrone (Celery) ======================================================
    path("solve/start", views.solve_start, name="ps_solve_start"),
    path("improve/start", views.improve_start, name="ps_improve_start"),
    path("solve/status/<str:task_id>", views.solve_status, name="ps_solve_status"),

    # === Export du document ==============================================================
    path("export", views.export, name="ps_export"),
    path("download/<str:token>", views.download, name="ps_download"),
]

from .base import *

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

# Pas de Redis pendant les tests : cache local + Celery exécuté en place
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "plansalle-tests",
    }
}

CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_TASK_STORE_EAGER_RESULT = True

# recuit court pour des tests rapides
PLANSALLE = {
    "RESTARTS": 3,
    "ITERS": 2000,
    "SEED": 12345,
}

# caplog écoute sur le logger racine
LOGGING["loggers"]["plansalle"]["propagate"] = True

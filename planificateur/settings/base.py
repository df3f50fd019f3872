from pathlib import Path
import os


def _level(env_name: str, default: str = "INFO") -> str:
    val = os.getenv(env_name, default).upper()
    return val if val in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"} else default


BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-change-me")
DEBUG = False  # override in dev

ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if os.getenv("DJANGO_ALLOWED_HOSTS") else []

# pas de modèles : le service est sans état (documents JSON + cache)
INSTALLED_APPS = [
    "plansalle",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
]

ROOT_URLCONF = "planificateur.urls"

WSGI_APPLICATION = "planificateur.wsgi.application"

DATABASES = {}

# locales
LANGUAGE_CODE = "fr-fr"
TIME_ZONE = "Europe/Paris"
USE_I18N = True
USE_TZ = True

# LOGS
# comments in English
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "require_debug_false": {"()": "django.utils.log.RequireDebugFalse"},
    },
    "formatters": {
        "console": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "console"},
        "mail_admins": {
            "class": "django.utils.log.AdminEmailHandler",
            "level": "ERROR",
            "filters": ["require_debug_false"],
            "include_html": True,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": _level("DJANGO_LOG_LEVEL", "INFO"),
    },
    "loggers": {
        "django.server": {
            "handlers": ["console"],
            "level": _level("DJANGO_SERVER_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        # Only errors go to mail_admins to avoid noise
        "django.request": {
            "handlers": ["console", "mail_admins"],
            "level": "ERROR",
            "propagate": False,
        },
        # Solver progress (restarts at DEBUG, summaries at INFO)
        "plansalle": {
            "handlers": ["console"],
            "level": _level("PLANSALLE_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

# --- Redis / Celery ---
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_RESULT_EXPIRES = 3600  # 1h
CELERY_TASK_TIME_LIMIT = 300  # le recuit complet peut être long
CELERY_TASK_SOFT_TIME_LIMIT = 290

# Cache sur Redis (documents exportés, pas de DB)
CACHES = {
    "default": {
        "BACKEND": "django_redis.cache.RedisCache",
        "LOCATION": os.getenv("REDIS_CACHE_URL", "redis://localhost:6379/2"),
        "OPTIONS": {"CLIENT_CLASS": "django_redis.client.DefaultClient"},
        "TIMEOUT": 3600,  # 1h
    }
}

# Réglages du recuit (surchargent les défauts de plansalle.tasks)
PLANSALLE = {
    "RESTARTS": int(os.getenv("PLANSALLE_RESTARTS", "25")),
    "ITERS": int(os.getenv("PLANSALLE_ITERS", "25000")),
    "SEED": int(os.getenv("PLANSALLE_SEED", "12345")),
}

from .base import *
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env.dev into process env for local development only.
load_dotenv(Path(BASE_DIR) / ".env.dev")


DEBUG = True
ALLOWED_HOSTS = []

# Celery eager en local si aucun worker n'est lancé
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_EAGER", "0") == "1"

EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"
SERVER_EMAIL = os.getenv("SERVER_EMAIL", "django@localhost")

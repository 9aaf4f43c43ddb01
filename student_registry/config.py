"""Environment-driven settings for the registry console."""

import os
import uuid

# --------- Configuration ----------
SECRET_KEY = os.environ.get("SECRET_KEY", str(uuid.uuid4()))
PORT = int(os.environ.get("PORT", "8080"))
LOG_LEVEL = os.environ.get("REGISTRY_LOG_LEVEL", "INFO").upper()

# Seeded on first request so a fresh process can always be administered
DEFAULT_ADMIN_EMAIL = os.environ.get("DEFAULT_ADMIN_EMAIL", "admin@local")
DEFAULT_ADMIN_PASSWORD = os.environ.get("DEFAULT_ADMIN_PASSWORD", "admin123")


def as_flask_config() -> dict:
    return {
        "SECRET_KEY": SECRET_KEY,
        "DEFAULT_ADMIN_EMAIL": DEFAULT_ADMIN_EMAIL,
        "DEFAULT_ADMIN_PASSWORD": DEFAULT_ADMIN_PASSWORD,
    }

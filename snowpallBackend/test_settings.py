import os

# Mock SECRET_KEY for tests BEFORE importing settings to bypass validation
os.environ.setdefault("SECRET_KEY", "django-insecure-test-key-for-unit-tests-only")

from .settings import *  # noqa: F403

# Override Database to use SQLite for tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
    }
}

# Disable external services
INFRASTRUCTURE["STORAGE_BACKEND"] = "local"  # noqa: F405

STRIPE_SECRET_KEY = "sk_test_mock_key"
ACCUWEATHER_API_KEY = "test-weather-key"

# No sleeping between persistence retries
LEDGER_RETRY_BACKOFF = 0
LEDGER_PERSIST_ATTEMPTS = 3
PAYOUT_MAX_RETRIES = 3

TAX_RATES = {"default": Decimal("0.10")}  # noqa: F405

CELERY_TASK_ALWAYS_EAGER = True

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Enable SessionAuthentication for tests to support client.force_login()
REST_FRAMEWORK["DEFAULT_AUTHENTICATION_CLASSES"].append(  # noqa: F405
    "rest_framework.authentication.SessionAuthentication"
)

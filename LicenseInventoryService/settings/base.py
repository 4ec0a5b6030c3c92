"""
Base Django settings for LicenseInventoryService.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-3v!k0r7x$inventory-dev-only-key-9q#m2p@w6z"
)

ALLOWED_HOSTS = [host for host in os.environ.get("ALLOWED_HOSTS", "").split(",") if host]

# Application definition
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "LicenseInventoryService.apps.LicenseInventoryServiceConfig",
    "core",
    "licenses",
    "products",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    # Custom middleware
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
    "core.middleware.auth.ActingUserMiddleware",
]

ROOT_URLCONF = "LicenseInventoryService.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "LicenseInventoryService.wsgi.application"
ASGI_APPLICATION = "LicenseInventoryService.asgi.application"

# Licenses live in the external inventory API; the local database only
# backs Django's own bookkeeping.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "America/Sao_Paulo")
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Inventory Service API",
    "DESCRIPTION": (
        "Software license inventory. Lists licenses grouped by product with "
        "purchased, used and available counts, and manages the product registry."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "TAGS": [
        {"name": "Inventory API", "description": "License inventory and product registry"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# External inventory API
LICENSE_INVENTORY_API = {
    "BASE_URL": os.environ.get("LICENSE_INVENTORY_API_URL", "http://localhost:3001/api"),
    "TOKEN": os.environ.get("LICENSE_INVENTORY_API_TOKEN") or None,
    "TIMEOUT": float(os.environ.get("LICENSE_INVENTORY_API_TIMEOUT", "10")),
}
LICENSE_INVENTORY_GATEWAY = os.environ.get(
    "LICENSE_INVENTORY_GATEWAY",
    "licenses.infrastructure.gateways.http_inventory_gateway.HttpLicenseInventoryGateway",
)

# Inventory presentation
LICENSE_EXPIRING_SOON_DAYS = 30
LICENSE_DATE_DISPLAY_FORMAT = "%d/%m/%Y"

# Observability
PROMETHEUS_PORT = int(os.environ["PROMETHEUS_PORT"]) if os.environ.get("PROMETHEUS_PORT") else None
LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))

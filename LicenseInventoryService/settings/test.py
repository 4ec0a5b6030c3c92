"""
Test settings for LicenseInventoryService.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

TIME_ZONE = "America/Sao_Paulo"

# Tests never reach the external API
LICENSE_INVENTORY_GATEWAY = "tests.fakes.InMemoryLicenseInventoryGateway"
LICENSE_INVENTORY_API = {
    "BASE_URL": "http://inventory.test/api",
    "TOKEN": "test-token",
    "TIMEOUT": 5,
}

# Disable logging during tests
LOGGING_CONFIG = None

# No metrics server in tests
PROMETHEUS_PORT = None

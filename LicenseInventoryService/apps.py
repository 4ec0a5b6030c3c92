"""
App configuration for License Inventory Service.
"""

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class LicenseInventoryServiceConfig(AppConfig):
    """App configuration for LicenseInventoryService."""

    name = "LicenseInventoryService"
    verbose_name = "License Inventory Service"

    def ready(self):
        """Register event handlers and expose metrics once apps are loaded."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
        self.setup_metrics()
        logger.debug("License inventory service ready")

    def setup_metrics(self):
        """Start the Prometheus scrape endpoint when PROMETHEUS_PORT is set."""
        port = getattr(settings, "PROMETHEUS_PORT", None)
        if not port:
            return
        from core.metrics import start_metrics_server

        start_metrics_server(port)

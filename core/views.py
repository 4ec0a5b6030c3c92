"""
Core views for health checks and system status.
"""

import logging

from django.conf import settings
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.utils.module_loading import import_string
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from licenses.infrastructure.gateways.provider import DEFAULT_GATEWAY

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        """Return service health status."""
        return JsonResponse({"status": "healthy", "service": "license-inventory-service"})


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness check endpoint."""

    def get(self, _request):
        """Check if service is ready to accept traffic."""
        checks = {
            "gateway": self._check_gateway(),
            "inventory_api": self._check_inventory_api(),
        }

        all_healthy = all(checks.values())
        return JsonResponse(
            {
                "status": "ready" if all_healthy else "not_ready",
                "checks": checks,
            },
            status=200 if all_healthy else 503,
        )

    def _check_gateway(self) -> bool:
        """Check the configured gateway class can be imported."""
        dotted_path = getattr(settings, "LICENSE_INVENTORY_GATEWAY", DEFAULT_GATEWAY)
        try:
            import_string(dotted_path)
        except ImportError:
            logger.error("Inventory gateway %s cannot be imported", dotted_path)
            return False
        return True

    def _check_inventory_api(self) -> bool:
        """The HTTP gateway needs a base URL; other gateways do not."""
        dotted_path = getattr(settings, "LICENSE_INVENTORY_GATEWAY", DEFAULT_GATEWAY)
        if dotted_path != DEFAULT_GATEWAY:
            return True
        return bool(getattr(settings, "LICENSE_INVENTORY_API", {}).get("BASE_URL"))

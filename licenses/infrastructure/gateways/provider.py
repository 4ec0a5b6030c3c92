"""
Gateway provider.

Resolves the LicenseInventoryGateway implementation named by the
LICENSE_INVENTORY_GATEWAY setting and keeps one instance per process.
"""
import logging

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver
from django.utils.module_loading import import_string

from licenses.ports.license_inventory_gateway import LicenseInventoryGateway

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY = (
    "licenses.infrastructure.gateways.http_inventory_gateway.HttpLicenseInventoryGateway"
)

_gateway = None


def get_inventory_gateway() -> LicenseInventoryGateway:
    """Return the configured gateway, building it on first use."""
    global _gateway
    if _gateway is None:
        dotted_path = getattr(settings, "LICENSE_INVENTORY_GATEWAY", DEFAULT_GATEWAY)
        gateway_class = import_string(dotted_path)
        _gateway = gateway_class()
        logger.info("Using inventory gateway %s", dotted_path)
    return _gateway


def reset_inventory_gateway() -> None:
    """Forget the current gateway instance."""
    global _gateway
    _gateway = None


@receiver(setting_changed)
def _reset_on_setting_changed(setting, **kwargs):
    if setting in ("LICENSE_INVENTORY_GATEWAY", "LICENSE_INVENTORY_API"):
        reset_inventory_gateway()

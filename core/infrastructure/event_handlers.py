"""
Event handlers for domain events.

These handlers process inventory events for side effects like audit
logging and business metrics.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from core.metrics import inventory_operations_total
from licenses.domain.events import LicenseAdded, LicenseDeleted, LicenseUpdated
from products.domain.events import (
    LicenseTotalsSaved,
    ProductAdded,
    ProductRemoved,
    ProductRenamed,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")

INVENTORY_EVENTS = (
    LicenseAdded,
    LicenseUpdated,
    LicenseDeleted,
    ProductAdded,
    ProductRenamed,
    ProductRemoved,
    LicenseTotalsSaved,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one structured record per inventory mutation.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        record = event.to_dict()
        audit_logger.info(
            "Audit log: %s - %s by %s",
            event.event_type,
            event.aggregate_id,
            event.actor,
            extra=record,
        )


class MetricsEventHandler(EventHandler):
    """Counts applied inventory mutations by event type."""

    async def handle(self, event: DomainEvent) -> None:
        inventory_operations_total.labels(operation=event.event_type).inc()


audit_handler = AuditLogEventHandler()
metrics_handler = MetricsEventHandler()


def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    for event_type in INVENTORY_EVENTS:
        bus.subscribe(event_type, audit_handler)
        bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")

"""
Django management command to report expired and expiring licenses.

This command should be run periodically (e.g., via cron or scheduled task).
"""

import logging
from collections import defaultdict

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import RemoteInventoryError
from core.domain.value_objects import ActingUser, ExpirationStatus, UserRole
from licenses.application.services.inventory_loader import InventoryLoader
from licenses.application.services.inventory_presenter import InventoryPresenter
from licenses.domain.expiration import EXPIRING_SOON_DAYS
from licenses.infrastructure.gateways.provider import get_inventory_gateway
from products.domain.registry import sort_product_names

logger = logging.getLogger(__name__)

REPORTED_STATUSES = (ExpirationStatus.EXPIRED, ExpirationStatus.EXPIRING_SOON)


class Command(BaseCommand):
    """Command to list expired and expiring-soon licenses per product."""

    help = "Report expired and expiring-soon licenses per product"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--days",
            type=int,
            default=getattr(settings, "LICENSE_EXPIRING_SOON_DAYS", EXPIRING_SOON_DAYS),
            help="Days ahead that count as expiring soon",
        )
        parser.add_argument(
            "--username",
            default="expiration-report",
            help="User the licenses are fetched for (as administrator)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if options["days"] < 0:
            raise CommandError("--days must not be negative")

        user = ActingUser(username=options["username"], role=UserRole.ADMIN)
        try:
            snapshot = async_to_sync(InventoryLoader(get_inventory_gateway()).load)(user)
        except RemoteInventoryError as e:
            raise CommandError(e.message) from e

        presenter = InventoryPresenter()
        presenter.window_days = options["days"]

        by_product = defaultdict(list)
        for license in snapshot.licenses:
            info = presenter.describe_expiration(license)
            if info.status in REPORTED_STATUSES:
                by_product[license.product].append((license, info))

        if not by_product:
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS("No expired or expiring licenses"))
            return

        count = sum(len(entries) for entries in by_product.values())
        self.stdout.write(f"Found {count} expired or expiring license(s)")
        for product in sort_product_names(by_product):
            self.stdout.write(product)
            for license, info in sorted(by_product[product], key=lambda e: e[1].expires_on):
                expires_on = info.expires_on.strftime(presenter.display_format)
                self.stdout.write(
                    f"  - License {license.id} ({license.assigned_user or '-'}): "
                    f"{info.label}, {expires_on}"
                )
        logger.info("Expiration report listed %d license(s)", count)

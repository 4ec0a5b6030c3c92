"""
Inventory presentation.

Turns the derived inventory view into DTOs, resolving "today" and the
display settings from Django configuration.
"""
from datetime import date
from typing import Optional

from django.conf import settings
from django.utils import timezone

from core.domain.value_objects import ActingUser
from licenses.application.dto.license_dto import (
    ApprovalBadgeDTO,
    ExpirationDTO,
    InventoryViewDTO,
    LicenseRowDTO,
    ProductGroupDTO,
)
from licenses.domain.expiration import (
    DEFAULT_DISPLAY_FORMAT,
    EXPIRING_SOON_DAYS,
    ExpirationInfo,
)
from licenses.domain.grouping import ProductGroup
from licenses.domain.inventory import InventoryView
from licenses.domain.license import License
from licenses.domain.services import approval_badge


class InventoryPresenter:
    """Builds inventory DTOs."""

    def __init__(self, today: Optional[date] = None):
        """
        Initialize presenter.

        Args:
            today: Reference date; defaults to the local date in TIME_ZONE
        """
        self.today = today or timezone.localdate()
        self.tz = timezone.get_current_timezone()
        self.window_days = getattr(settings, "LICENSE_EXPIRING_SOON_DAYS", EXPIRING_SOON_DAYS)
        self.display_format = getattr(
            settings, "LICENSE_DATE_DISPLAY_FORMAT", DEFAULT_DISPLAY_FORMAT
        )

    def describe_expiration(self, license: License) -> ExpirationInfo:
        return ExpirationInfo.describe(
            license.expiration_date,
            self.today,
            window_days=self.window_days,
            tz=self.tz,
            display_format=self.display_format,
        )

    def license_row(self, license: License) -> LicenseRowDTO:
        """Build the DTO for one license row."""
        expiration = self.describe_expiration(license)
        badge = approval_badge(license.approval_status)
        return LicenseRowDTO(
            id=license.id,
            product=license.product,
            serial_key=license.serial_key,
            assigned_user=license.assigned_user,
            license_type=license.license_type,
            expiration_date=license.expiration_date,
            job_title=license.job_title,
            department=license.department,
            manager=license.manager,
            cost_center=license.cost_center,
            ledger_account=license.ledger_account,
            computer_name=license.computer_name,
            ticket_number=license.ticket_number,
            notes=license.notes,
            approval_status=license.approval_status,
            rejection_reason=license.rejection_reason,
            expiration=ExpirationDTO(
                status=expiration.status.value,
                label=expiration.label,
                expires_on=expiration.expires_on.isoformat() if expiration.expires_on else None,
            ),
            approval_badge=(
                ApprovalBadgeDTO(status=badge.status.value, label=badge.label) if badge else None
            ),
        )

    def product_group(self, group: ProductGroup) -> ProductGroupDTO:
        """Build the DTO for one product section."""
        return ProductGroupDTO(
            product=group.product,
            registered=group.registered,
            total=group.usage.total,
            used=group.usage.used,
            available=group.usage.available,
            has_shortage=group.usage.has_shortage,
            licenses=[self.license_row(license) for license in group.licenses],
        )

    def inventory(self, view: InventoryView, user: ActingUser) -> InventoryViewDTO:
        """Build the DTO for the whole screen."""
        return InventoryViewDTO(
            products=list(view.registry.names),
            totals=view.registry.totals_with_defaults(),
            groups=[self.product_group(group) for group in view.groups],
            orphaned_products=view.orphaned_products,
            can_manage_products=user.is_admin,
        )

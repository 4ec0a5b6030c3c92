"""
License domain entity.

This is the core domain entity representing one assigned software license.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import asdict, dataclass, fields, replace
from typing import List, Optional

from core.domain.exceptions import InvalidLicenseFieldsError
from core.domain.value_objects import ApprovalStatus


@dataclass(frozen=True)
class LicenseFields:
    """
    Editable attributes of a license.

    This is what the add and update operations send; update replaces
    every field.
    """

    product: str
    serial_key: str = ""
    assigned_user: str = ""
    license_type: Optional[str] = None
    expiration_date: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    manager: Optional[str] = None
    cost_center: Optional[str] = None
    ledger_account: Optional[str] = None
    computer_name: Optional[str] = None
    ticket_number: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        """Validate license fields."""
        if not self.product or not self.product.strip():
            raise InvalidLicenseFieldsError("Product is required")
        if len(self.product) > 255:
            raise InvalidLicenseFieldsError("Product name too long")

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Identity is the server-assigned integer ``id``. Instances are
    immutable; changes produce new instances.
    """

    id: int
    product: str
    serial_key: str = ""
    assigned_user: str = ""
    license_type: Optional[str] = None
    expiration_date: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    manager: Optional[str] = None
    cost_center: Optional[str] = None
    ledger_account: Optional[str] = None
    computer_name: Optional[str] = None
    ticket_number: Optional[str] = None
    notes: Optional[str] = None
    approval_status: Optional[str] = None
    rejection_reason: Optional[str] = None

    @classmethod
    def from_fields(
        cls,
        license_id: int,
        license_fields: LicenseFields,
        approval_status: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> "License":
        """
        Build a License from its editable fields.

        Args:
            license_id: Server-assigned id
            license_fields: Editable attributes
            approval_status: Raw approval workflow state
            rejection_reason: Reason given when rejected

        Returns:
            License entity instance
        """
        return cls(
            id=license_id,
            approval_status=approval_status,
            rejection_reason=rejection_reason,
            **asdict(license_fields),
        )

    @property
    def approval(self) -> Optional[ApprovalStatus]:
        """Parsed approval status; None for values the workflow does not define."""
        return ApprovalStatus.parse(self.approval_status)

    def with_fields(self, license_fields: LicenseFields) -> "License":
        """Full field replace, id and approval state preserved."""
        return replace(self, **asdict(license_fields))

    def with_product(self, product: str) -> "License":
        """Return a copy assigned to another product."""
        return replace(self, product=product)

    def searchable_values(self) -> List[str]:
        """String form of every populated attribute, used by free-text search."""
        values = []
        for attribute in fields(self):
            value = getattr(self, attribute.name)
            if value is None:
                continue
            values.append(str(value))
        return values

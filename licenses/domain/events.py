"""
License domain events.

Domain events represent something that happened in the license domain.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LicenseAdded(DomainEvent):
    """Event raised when a license was created through the inventory API."""

    license_id: int
    product: str
    approval_status: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "license_id": self.license_id,
            "product": self.product,
            "approval_status": self.approval_status,
        }


@dataclass(frozen=True, kw_only=True)
class LicenseUpdated(DomainEvent):
    """Event raised when a license's fields were replaced."""

    license_id: int
    product: str

    def payload(self) -> Dict[str, Any]:
        return {"license_id": self.license_id, "product": self.product}


@dataclass(frozen=True, kw_only=True)
class LicenseDeleted(DomainEvent):
    """Event raised when a license was deleted."""

    license_id: int

    def payload(self) -> Dict[str, Any]:
        return {"license_id": self.license_id}

"""
Product registry domain events.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from core.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ProductAdded(DomainEvent):
    """Event raised when a product was registered."""

    product: str

    def payload(self) -> Dict[str, Any]:
        return {"product": self.product}


@dataclass(frozen=True, kw_only=True)
class ProductRenamed(DomainEvent):
    """Event raised when a product and its licenses were renamed."""

    old_name: str
    new_name: str

    def payload(self) -> Dict[str, Any]:
        return {"old_name": self.old_name, "new_name": self.new_name}


@dataclass(frozen=True, kw_only=True)
class ProductRemoved(DomainEvent):
    """Event raised when a product was dropped from the registry."""

    product: str
    licenses_still_referencing: int = 0

    def payload(self) -> Dict[str, Any]:
        return {
            "product": self.product,
            "licenses_still_referencing": self.licenses_still_referencing,
        }


@dataclass(frozen=True, kw_only=True)
class LicenseTotalsSaved(DomainEvent):
    """Event raised when the purchased-totals mapping was replaced."""

    totals: Dict[str, int] = field(default_factory=dict)

    def payload(self) -> Dict[str, Any]:
        return {"totals": dict(self.totals)}

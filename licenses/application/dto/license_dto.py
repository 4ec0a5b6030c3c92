"""
Inventory DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class ExpirationDTO:
    """DTO for the expiration column of a license row."""

    status: str
    label: str
    expires_on: Optional[str]


@dataclass
class ApprovalBadgeDTO:
    """DTO for the approval badge of a license row."""

    status: str
    label: str


@dataclass
class LicenseRowDTO:
    """DTO for one license row."""

    id: int
    product: str
    serial_key: str
    assigned_user: str
    license_type: Optional[str]
    expiration_date: Optional[str]
    job_title: Optional[str]
    department: Optional[str]
    manager: Optional[str]
    cost_center: Optional[str]
    ledger_account: Optional[str]
    computer_name: Optional[str]
    ticket_number: Optional[str]
    notes: Optional[str]
    approval_status: Optional[str]
    rejection_reason: Optional[str]
    expiration: ExpirationDTO
    approval_badge: Optional[ApprovalBadgeDTO]


@dataclass
class ProductGroupDTO:
    """DTO for one product section with its usage counters."""

    product: str
    registered: bool
    total: int
    used: int
    available: int
    has_shortage: bool
    licenses: List[LicenseRowDTO]


@dataclass
class InventoryViewDTO:
    """DTO for the whole inventory screen."""

    products: List[str]
    totals: Dict[str, int]
    groups: List[ProductGroupDTO]
    orphaned_products: List[str]
    can_manage_products: bool


@dataclass
class InventoryMutationResultDTO:
    """DTO returned after a mutation: a message and the reloaded inventory, if it could be reloaded."""

    message: Optional[str]
    inventory: Optional[InventoryViewDTO]
    license: Optional[LicenseRowDTO] = None

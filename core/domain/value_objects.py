"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(Enum):
    """Role of the user acting on the inventory."""

    ADMIN = "Admin"
    USER = "User"

    @classmethod
    def parse(cls, value: Optional[str]) -> "UserRole":
        """Any role other than Admin is a regular user."""
        if value and value.strip().lower() == cls.ADMIN.value.lower():
            return cls.ADMIN
        return cls.USER

    def __str__(self) -> str:
        """Return role as string."""
        return self.value


@dataclass(frozen=True)
class ActingUser:
    """The user on whose behalf an inventory operation runs."""

    username: str
    role: UserRole = UserRole.USER

    def __post_init__(self):
        """Validate username."""
        if not self.username or not self.username.strip():
            raise ValueError("Username cannot be empty")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class ApprovalStatus(Enum):
    """Approval workflow state of a license request."""

    APPROVED = "approved"
    PENDING_APPROVAL = "pending_approval"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ApprovalStatus"]:
        """
        Parse a raw approval status.

        Absent values mean approved; unknown values return None.
        """
        if not value:
            return cls.APPROVED
        try:
            return cls(value)
        except ValueError:
            return None

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class ExpirationStatus(Enum):
    """Expiration classification of a license."""

    PERPETUAL = "perpetual"
    EXPIRING_SOON = "expiring_soon"
    EXPIRED = "expired"
    VALID = "valid"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

"""
DeleteLicenseCommand.

Command to permanently delete a license.
"""
from dataclasses import dataclass

from core.domain.value_objects import ActingUser


@dataclass
class DeleteLicenseCommand:
    """Command to delete a license. Nothing happens unless confirmed."""

    license_id: int
    acting_user: ActingUser
    confirmed: bool = False

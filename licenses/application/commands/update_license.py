"""
UpdateLicenseCommand.

Command to replace every editable field of a license.
"""
from dataclasses import dataclass

from core.domain.value_objects import ActingUser
from licenses.domain.license import LicenseFields


@dataclass
class UpdateLicenseCommand:
    """Command to update a license; the id is preserved."""

    license_id: int
    fields: LicenseFields
    acting_user: ActingUser

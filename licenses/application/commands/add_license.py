"""
AddLicenseCommand.

Command to create a license record.
"""
from dataclasses import dataclass

from core.domain.value_objects import ActingUser
from licenses.domain.license import LicenseFields


@dataclass
class AddLicenseCommand:
    """
    Command to add a license.

    The external API decides whether the license lands approved or
    pending approval, based on the acting user's role.
    """

    fields: LicenseFields
    acting_user: ActingUser

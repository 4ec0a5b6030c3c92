"""
RenameProductCommand.

Command to rename a product on every license and on the totals mapping.
"""
from dataclasses import dataclass

from core.domain.value_objects import ActingUser


@dataclass
class RenameProductCommand:
    """Command to rename a product."""

    old_name: str
    new_name: str
    acting_user: ActingUser

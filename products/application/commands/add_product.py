"""
AddProductCommand.

Command to register a product name that has no licenses yet.
"""
from dataclasses import dataclass

from core.domain.value_objects import ActingUser


@dataclass
class AddProductCommand:
    """Command to add a product with a purchased total of 0."""

    name: str
    acting_user: ActingUser

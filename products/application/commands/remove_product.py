"""
RemoveProductCommand.

Command to drop a product name from the registry.
"""
from dataclasses import dataclass

from core.domain.value_objects import ActingUser


@dataclass
class RemoveProductCommand:
    """
    Command to remove a product from the registry.

    License records referencing the product are kept. Nothing happens
    unless confirmed.
    """

    name: str
    acting_user: ActingUser
    confirmed: bool = False

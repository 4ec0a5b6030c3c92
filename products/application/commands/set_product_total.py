"""
SetProductTotalCommand.

Command to assign the purchased total of one product.
"""
from dataclasses import dataclass
from typing import Union

from core.domain.value_objects import ActingUser


@dataclass
class SetProductTotalCommand:
    """Command to set a product's purchased total; ``total`` is raw user input."""

    name: str
    total: Union[int, str]
    acting_user: ActingUser

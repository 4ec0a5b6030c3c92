"""
SaveLicenseTotalsCommand.

Command to replace the whole purchased-totals mapping.
"""
from dataclasses import dataclass, field
from typing import Dict, Union

from core.domain.value_objects import ActingUser


@dataclass
class SaveLicenseTotalsCommand:
    """Command to save every purchased total at once; values are raw user input."""

    acting_user: ActingUser
    totals: Dict[str, Union[int, str]] = field(default_factory=dict)

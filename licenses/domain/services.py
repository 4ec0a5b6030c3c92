"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import ActingUser, ApprovalStatus
from licenses.domain.license import License


@dataclass(frozen=True)
class ApprovalBadge:
    """Label shown next to a license that is not in the default approved state."""

    status: ApprovalStatus
    label: str


_BADGES = {
    ApprovalStatus.PENDING_APPROVAL: ApprovalBadge(ApprovalStatus.PENDING_APPROVAL, "Pending"),
    ApprovalStatus.REJECTED: ApprovalBadge(ApprovalStatus.REJECTED, "Rejected"),
}


def approval_badge(raw_status: Optional[str]) -> Optional[ApprovalBadge]:
    """
    Map a raw approval status to its badge.

    Approved or absent statuses have no badge, and neither do values the
    workflow does not define.
    """
    status = ApprovalStatus.parse(raw_status)
    if status is None:
        return None
    return _BADGES.get(status)


class LicenseApprovalPolicy:
    """Domain service describing how creation interacts with approval."""

    PENDING_MESSAGE = (
        "License added successfully. Your request was sent to an administrator for approval."
    )

    @staticmethod
    def requires_approval(user: ActingUser) -> bool:
        """
        Check whether licenses created by this user need approval.

        Args:
            user: Acting user

        Returns:
            True for non-admin users
        """
        return not user.is_admin

    @classmethod
    def creation_message(cls, user: ActingUser, created: License) -> Optional[str]:
        """
        Message to show after a license was created.

        The external workflow has the last word: the message is only shown
        when the user needs approval and the license did not land approved.
        """
        if not cls.requires_approval(user):
            return None
        if created.approval == ApprovalStatus.APPROVED and created.approval_status:
            return None
        return cls.PENDING_MESSAGE

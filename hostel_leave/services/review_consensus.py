"""
Consensus rules for the two-reviewer leave workflow.

Each reviewer slot moves one way, pending -> approved | rejected. The
overall status is never stored independently of the slots: a rejection in
any slot is final, approval needs every slot approved.
"""
import enum
from datetime import datetime
from typing import Mapping, Union

from hostel_leave.core.exceptions import ValidationError
from hostel_leave.models.leave_request import LeaveRequest, LeaveReview, LeaveStatus, ReviewerRole

ADMIN_OVERRIDE_REMARK = "Approved by admin"


class ReviewAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def decision(self) -> LeaveStatus:
        if self is ReviewAction.APPROVE:
            return LeaveStatus.APPROVED
        return LeaveStatus.REJECTED


def parse_action(value: Union[str, ReviewAction, None]) -> ReviewAction:
    try:
        return ReviewAction(value)
    except ValueError:
        raise ValidationError("Invalid action", details={"allowed": [a.value for a in ReviewAction]}) from None


def derive_overall_status(reviews: Mapping[ReviewerRole, LeaveReview]) -> LeaveStatus:
    statuses = [reviews[role].status for role in ReviewerRole]
    if LeaveStatus.REJECTED in statuses:
        return LeaveStatus.REJECTED
    if all(status is LeaveStatus.APPROVED for status in statuses):
        return LeaveStatus.APPROVED
    return LeaveStatus.PENDING


def apply_review(
    leave: LeaveRequest,
    role: ReviewerRole,
    action: ReviewAction,
    reviewer_id: int,
    remarks: str,
    now: datetime,
) -> LeaveStatus:
    """
    Record one reviewer's decision and recompute the overall status.
    Redacts the leave location when the result is terminal.
    """
    leave.set_review(role, LeaveReview(
        status=action.decision,
        remarks=remarks or "",
        reviewed_by=reviewer_id,
        reviewed_at=now,
    ))
    overall = derive_overall_status(leave.reviews)
    leave.status = overall.value
    if overall.is_terminal:
        leave.leave_location = None
    return overall


def apply_override(leave: LeaveRequest, action: ReviewAction, admin_id: int, now: datetime) -> LeaveStatus:
    """Set every reviewer slot to the same decision in one step."""
    decision = action.decision
    for role in ReviewerRole:
        leave.set_review(role, LeaveReview(
            status=decision,
            remarks=ADMIN_OVERRIDE_REMARK,
            reviewed_by=admin_id,
            reviewed_at=now,
        ))
    leave.status = decision.value
    leave.leave_location = None
    return decision

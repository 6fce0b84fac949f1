import pytest
from datetime import datetime, timezone
from hostel_leave.core.exceptions import ValidationError
from hostel_leave.models.leave_request import LeaveRequest, LeaveReview, LeaveStatus, ReviewerRole
from hostel_leave.services.review_consensus import (
    ReviewAction,
    apply_override,
    apply_review,
    derive_overall_status,
    parse_action,
)

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)

def _pending_leave():
    leave = LeaveRequest(status=LeaveStatus.PENDING.value)
    for role in ReviewerRole:
        leave.set_review(role, LeaveReview(status=LeaveStatus.PENDING))
    leave.leave_location = (77.5946, 12.9716)
    return leave

def _reviews(parent: LeaveStatus, staff: LeaveStatus):
    return {
        ReviewerRole.PARENT: LeaveReview(status=parent),
        ReviewerRole.STAFF: LeaveReview(status=staff),
    }

@pytest.mark.parametrize("parent,staff,expected", [
    (LeaveStatus.PENDING, LeaveStatus.PENDING, LeaveStatus.PENDING),
    (LeaveStatus.APPROVED, LeaveStatus.PENDING, LeaveStatus.PENDING),
    (LeaveStatus.PENDING, LeaveStatus.APPROVED, LeaveStatus.PENDING),
    (LeaveStatus.APPROVED, LeaveStatus.APPROVED, LeaveStatus.APPROVED),
    (LeaveStatus.REJECTED, LeaveStatus.PENDING, LeaveStatus.REJECTED),
    (LeaveStatus.PENDING, LeaveStatus.REJECTED, LeaveStatus.REJECTED),
    (LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.REJECTED),
])
def test_overall_status_table(parent, staff, expected):
    assert derive_overall_status(_reviews(parent, staff)) is expected

def test_parse_action_rejects_unknown():
    with pytest.raises(ValidationError):
        parse_action("maybe")
    with pytest.raises(ValidationError):
        parse_action(None)

def test_first_approval_keeps_location():
    leave = _pending_leave()
    overall = apply_review(leave, ReviewerRole.STAFF, ReviewAction.APPROVE, 7, "ok", NOW)
    assert overall is LeaveStatus.PENDING
    assert leave.leave_location == (77.5946, 12.9716)
    assert leave.staff_review == LeaveReview(LeaveStatus.APPROVED, "ok", 7, NOW)

def test_second_approval_finalizes_and_redacts():
    leave = _pending_leave()
    apply_review(leave, ReviewerRole.STAFF, ReviewAction.APPROVE, 7, "", NOW)
    overall = apply_review(leave, ReviewerRole.PARENT, ReviewAction.APPROVE, 3, "", NOW)
    assert overall is LeaveStatus.APPROVED
    assert leave.status == "approved"
    assert leave.leave_location is None

def test_rejection_is_final_and_redacts():
    leave = _pending_leave()
    overall = apply_review(leave, ReviewerRole.PARENT, ReviewAction.REJECT, 3, "not safe", NOW)
    assert overall is LeaveStatus.REJECTED
    assert leave.leave_location is None
    assert leave.staff_review.status is LeaveStatus.PENDING

def test_override_sets_both_reviews():
    leave = _pending_leave()
    apply_override(leave, ReviewAction.REJECT, 1, NOW)
    for review in leave.reviews.values():
        assert review == LeaveReview(LeaveStatus.REJECTED, "Approved by admin", 1, NOW)
    assert leave.status == "rejected"
    assert leave.leave_location is None

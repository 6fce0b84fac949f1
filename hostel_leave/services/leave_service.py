"""
Leave request lifecycle: submission, the parent/staff review transitions,
the admin override and admin deletion.

Every transition is written as a compare-and-set. The row is read with its
version, the pending precondition is checked in memory and the UPDATE only
matches the version that was read (see LeaveRequest.__mapper_args__). A
concurrent writer therefore surfaces as ConflictError instead of a lost update.
"""
from collections import Counter
from typing import Any, Dict, List, Optional

from hostel_leave.core.exceptions import ConflictError, NotFoundError, ValidationError
from hostel_leave.models.leave_request import LeaveRequest, LeaveReview, LeaveStatus, ReviewerRole
from hostel_leave.models.user import User, UserRole, parent_children
from hostel_leave.schemas.leave import LeaveCreate
from hostel_leave.services.base import BaseService
from hostel_leave.services.geofence import check_parent_review, parse_location
from hostel_leave.services.review_consensus import (
    apply_override,
    apply_review,
    parse_action,
)


def require_id(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {label}")
    return value


class LeaveReviewService(BaseService):

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def _get_actor(self, user_id: int, role: UserRole, label: str) -> User:
        require_id(user_id, f"{label} ID")
        user = self.db.query(User).filter(User.id == user_id, User.role == role).first()
        if not user:
            raise NotFoundError(f"{label} not found")
        return user

    def _get_leave(self, leave_id: int) -> LeaveRequest:
        require_id(leave_id, "leave ID")
        leave = self.db.query(LeaveRequest).filter(LeaveRequest.id == leave_id).first()
        if not leave:
            raise NotFoundError("Leave not found")
        return leave

    def _get_child_leave(self, leave_id: int, parent: User) -> LeaveRequest:
        require_id(leave_id, "leave ID")
        leave = (
            self.db.query(LeaveRequest)
            .join(parent_children, parent_children.c.student_id == LeaveRequest.student_id)
            .filter(LeaveRequest.id == leave_id, parent_children.c.parent_id == parent.id)
            .first()
        )
        if not leave:
            raise NotFoundError("Leave not found or unauthorized")
        return leave

    @staticmethod
    def _ensure_pending(leave: LeaveRequest):
        if leave.status != LeaveStatus.PENDING.value:
            raise ConflictError("Leave already reviewed")

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def submit_leave(self, student_id: int, data: LeaveCreate) -> LeaveRequest:
        student = self._get_actor(student_id, UserRole.STUDENT, "Student")

        if not data.reason or not data.reason.strip():
            raise ValidationError("Reason is required")
        if data.end_date < data.start_date:
            raise ValidationError("End date cannot be before start date")
        if data.leave_location is None:
            raise ValidationError("Leave location data is missing or invalid")
        location = parse_location(data.leave_location, label="Leave location")

        leave = LeaveRequest(
            student_id=student.id,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason.strip(),
            leave_type=data.leave_type or "regular",
            contact_number=data.contact_number,
            parent_contact=data.parent_contact,
            address=data.address,
            status=LeaveStatus.PENDING.value,
        )
        for role in ReviewerRole:
            leave.set_review(role, LeaveReview(status=LeaveStatus.PENDING))
        leave.leave_location = location

        self.db.add(leave)
        self.commit("Failed to submit leave")
        self.db.refresh(leave)
        self.log_info("Leave submitted", leave_id=leave.id, student_id=student.id)
        return leave

    # ------------------------------------------------------------------
    # Review transitions
    # ------------------------------------------------------------------
    def review_as_parent(
        self,
        leave_id: int,
        parent_id: int,
        action: Any,
        remarks: Optional[str] = "",
        current_location: Any = None,
    ) -> LeaveRequest:
        review_action = parse_action(action)
        parent = self._get_actor(parent_id, UserRole.PARENT, "Parent")
        leave = self._get_child_leave(leave_id, parent)
        # Malformed caller location is rejected for both actions, before any state check
        parse_location(current_location)
        self._ensure_pending(leave)

        distance = check_parent_review(review_action, current_location, leave.leave_location)

        overall = apply_review(leave, ReviewerRole.PARENT, review_action, parent.id, remarks, self.now())
        self.commit("Failed to review leave")
        self.db.refresh(leave)
        self.log_info(
            "Leave reviewed by parent",
            leave_id=leave.id,
            action=review_action.value,
            status=overall.value,
            distance_km=round(distance, 3),
        )
        return leave

    def review_as_staff(
        self,
        leave_id: int,
        staff_id: int,
        action: Any,
        remarks: Optional[str] = "",
    ) -> LeaveRequest:
        review_action = parse_action(action)
        staff = self._get_actor(staff_id, UserRole.STAFF, "Staff")
        leave = self._get_leave(leave_id)
        self._ensure_pending(leave)

        overall = apply_review(leave, ReviewerRole.STAFF, review_action, staff.id, remarks, self.now())
        self.commit("Failed to review leave")
        self.db.refresh(leave)
        self.log_info(
            "Leave reviewed by staff",
            leave_id=leave.id,
            action=review_action.value,
            status=overall.value,
        )
        return leave

    def admin_override(self, leave_id: int, admin_id: int, action: Any) -> LeaveRequest:
        review_action = parse_action(action)
        admin = self._get_actor(admin_id, UserRole.ADMIN, "Admin")
        leave = self._get_leave(leave_id)
        previous = leave.status

        decision = apply_override(leave, review_action, admin.id, self.now())
        self.commit("Failed to save leave review")
        self.db.refresh(leave)
        self.log_info(
            "Leave decided by admin override",
            leave_id=leave.id,
            previous_status=previous,
            status=decision.value,
        )
        return leave

    # ------------------------------------------------------------------
    # Admin deletion and listings
    # ------------------------------------------------------------------
    def delete_leave(self, leave_id: int) -> None:
        leave = self._get_leave(leave_id)
        self.db.delete(leave)
        self.commit("Error deleting leave")
        self.log_info("Leave deleted", leave_id=leave_id)

    def list_student_leaves(self, student_id: int) -> List[LeaveRequest]:
        require_id(student_id, "student ID")
        return (
            self.db.query(LeaveRequest)
            .filter(LeaveRequest.student_id == student_id)
            .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
            .all()
        )

    def list_child_leaves(self, parent_id: int) -> List[LeaveRequest]:
        parent = self._get_actor(parent_id, UserRole.PARENT, "Parent")
        child_ids = parent.child_ids
        if not child_ids:
            return []
        return (
            self.db.query(LeaveRequest)
            .filter(LeaveRequest.student_id.in_(child_ids))
            .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
            .all()
        )

    def child_leave_stats(self, parent_id: int) -> List[Dict[str, Any]]:
        parent = self._get_actor(parent_id, UserRole.PARENT, "Parent")
        if not parent.children:
            raise NotFoundError("No children found")

        stats = []
        for child in parent.children:
            counts = Counter(leave.status for leave in child.leave_requests)
            stats.append({
                "student_id": child.id,
                "full_name": child.full_name,
                "room_number": child.room_number,
                "total": sum(counts.values()),
                "pending": counts.get(LeaveStatus.PENDING.value, 0),
                "approved": counts.get(LeaveStatus.APPROVED.value, 0),
                "rejected": counts.get(LeaveStatus.REJECTED.value, 0),
            })
        return stats

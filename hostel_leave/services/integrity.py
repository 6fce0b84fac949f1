"""
Referential integrity between students, parents and the records that
reference a student.

Only parent assignment runs as a single transaction. Link removal and the
cascades commit step by step; when they are interrupted the already
committed steps stand and the failure is reported as InternalError.
Dependents are always removed before their owner, so an interruption leaves
extra deletions rather than orphans.
"""
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError

from hostel_leave.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from hostel_leave.models.complaint import Complaint
from hostel_leave.models.leave_request import LeaveRequest
from hostel_leave.models.user import User, UserRole, parent_children
from hostel_leave.services.base import BaseService
from hostel_leave.services.leave_service import require_id


class ReferentialIntegrityService(BaseService):

    def _get_user(self, user_id: int, role: UserRole, label: str) -> User:
        require_id(user_id, f"{label} ID")
        user = self.db.query(User).filter(User.id == user_id, User.role == role).first()
        if not user:
            raise NotFoundError(f"{label} not found")
        return user

    # ------------------------------------------------------------------
    # Parent <-> student linkage
    # ------------------------------------------------------------------
    def _set_student_parent(self, student: User, parent: User):
        student.parent_id = parent.id
        self.db.flush()

    def _add_child(self, parent: User, student: User):
        self.db.execute(
            parent_children.insert().values(parent_id=parent.id, student_id=student.id)
        )

    def assign_parent(self, student_id: Any, parent_id: Any) -> Tuple[User, User]:
        """Both sides of the link are written in one transaction, or neither is."""
        if student_id is None or parent_id is None:
            raise ValidationError("Both studentId and parentId are required")
        require_id(student_id, "student ID")
        require_id(parent_id, "parent ID")

        student = self.db.query(User).filter(User.id == student_id, User.role == UserRole.STUDENT).first()
        parent = self.db.query(User).filter(User.id == parent_id, User.role == UserRole.PARENT).first()
        if not student or not parent:
            raise NotFoundError("Student or parent not found or invalid roles")
        if student.parent_id is not None:
            raise ConflictError("Student already has a parent assigned")

        try:
            self._set_student_parent(student, parent)
            self._add_child(parent, student)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Parent assignment aborted: {e}", exc_info=True)
            raise InternalError("Error assigning student to parent") from e
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(student)
        self.db.refresh(parent)
        self.log_info("Parent assigned", student_id=student.id, parent_id=parent.id)
        return student, parent

    def remove_parent_link(self, student_id: Any) -> None:
        student = self._get_user(student_id, UserRole.STUDENT, "Student")
        if student.parent_id is None:
            raise ConflictError("Student doesn't have a parent assigned")
        former_parent_id = student.parent_id

        # Two independent writes; a failure between them leaves parent_id set
        self.db.execute(
            delete(parent_children).where(
                parent_children.c.parent_id == former_parent_id,
                parent_children.c.student_id == student.id,
            )
        )
        self.commit("Error removing parent-student relationship")

        student.parent_id = None
        self.commit("Error removing parent-student relationship")
        self.log_info("Parent link removed", student_id=student.id, parent_id=former_parent_id)

    def get_student_parent_info(self, student_id: Any) -> Dict[str, Optional[User]]:
        student = self._get_user(student_id, UserRole.STUDENT, "Student")
        return {"student": student, "parent": student.parent}

    # ------------------------------------------------------------------
    # Cascading deletes
    # ------------------------------------------------------------------
    def delete_student(self, student_id: Any) -> None:
        student = self._get_user(student_id, UserRole.STUDENT, "Student")

        leaves_deleted = self.db.execute(
            delete(LeaveRequest).where(LeaveRequest.student_id == student.id)
        ).rowcount
        complaints_deleted = self.db.execute(
            delete(Complaint).where(Complaint.student_id == student.id)
        ).rowcount
        self.db.execute(delete(parent_children).where(parent_children.c.student_id == student.id))
        self.commit("Error deleting student")

        self.db.delete(student)
        self.commit("Error deleting student")
        self.log_info(
            "Student deleted with dependents",
            student_id=student_id,
            leaves_deleted=leaves_deleted,
            complaints_deleted=complaints_deleted,
        )

    def delete_parent(self, parent_id: Any) -> None:
        parent = self._get_user(parent_id, UserRole.PARENT, "Parent")
        child_ids = parent.child_ids

        # Back-references first; the children themselves are kept
        self.db.execute(
            update(User)
            .where((User.parent_id == parent.id) | (User.id.in_(child_ids)))
            .values(parent_id=None)
        )
        self.db.execute(delete(parent_children).where(parent_children.c.parent_id == parent.id))
        self.commit("Error deleting parent")

        self.db.delete(parent)
        self.commit("Error deleting parent")
        self.log_info("Parent deleted", parent_id=parent_id, children_unlinked=len(child_ids))

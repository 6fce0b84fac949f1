from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hostel_leave.core.schemas import ApiResponse
from hostel_leave.database import get_db
from hostel_leave.models.user import User
from hostel_leave.routers.auth_deps import require_admin
from hostel_leave.schemas.leave import AdminDecisionRequest, LeaveResponse
from hostel_leave.schemas.user import (
    AssignParentRequest,
    ParentLinkResponse,
    ParentSummary,
    StudentParentInfo,
    UserSummary,
)
from hostel_leave.services.integrity import ReferentialIntegrityService
from hostel_leave.services.leave_service import LeaveReviewService
from hostel_leave.services.review_consensus import parse_action

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


# --- Leave decisions ---

@router.post("/leaves/{leave_id}/decision", response_model=ApiResponse[LeaveResponse])
def override_leave(
    leave_id: int,
    decision: AdminDecisionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    leave = LeaveReviewService(db).admin_override(leave_id, current_user.id, decision.action)
    return ApiResponse[LeaveResponse].ok(
        LeaveResponse.model_validate(leave),
        message=f"Leave {parse_action(decision.action).decision.value} successfully",
    )


@router.delete("/leaves/{leave_id}", response_model=ApiResponse[None])
def delete_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    LeaveReviewService(db).delete_leave(leave_id)
    return ApiResponse[None].ok(message="leave deleted successfully")


# --- Parent / student relationships ---

@router.post("/relationships", response_model=ApiResponse[ParentLinkResponse])
def assign_parent(
    request: AssignParentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    student, parent = ReferentialIntegrityService(db).assign_parent(request.student_id, request.parent_id)
    payload = ParentLinkResponse(
        student=UserSummary.model_validate(student),
        parent=ParentSummary.model_validate(parent),
    )
    return ApiResponse[ParentLinkResponse].ok(payload, message="Student successfully assigned to parent")


@router.delete("/relationships/{student_id}", response_model=ApiResponse[None])
def remove_parent(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    ReferentialIntegrityService(db).remove_parent_link(student_id)
    return ApiResponse[None].ok(message="Parent-student relationship removed successfully")


@router.get("/students/{student_id}/parent", response_model=ApiResponse[StudentParentInfo])
def student_parent_info(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    info = ReferentialIntegrityService(db).get_student_parent_info(student_id)
    payload = StudentParentInfo(
        student=UserSummary.model_validate(info["student"]),
        parent=UserSummary.model_validate(info["parent"]) if info["parent"] else None,
    )
    return ApiResponse[StudentParentInfo].ok(payload)


# --- Cascading deletes ---

@router.delete("/students/{student_id}", response_model=ApiResponse[None])
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    ReferentialIntegrityService(db).delete_student(student_id)
    return ApiResponse[None].ok(message="student deleted successfully")


@router.delete("/parents/{parent_id}", response_model=ApiResponse[None])
def delete_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    ReferentialIntegrityService(db).delete_parent(parent_id)
    return ApiResponse[None].ok(message="Parent deleted successfully")

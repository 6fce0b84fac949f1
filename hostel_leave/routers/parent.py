from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hostel_leave.core.schemas import ApiResponse
from hostel_leave.database import get_db
from hostel_leave.models.user import User
from hostel_leave.routers.auth_deps import require_parent
from hostel_leave.schemas.leave import (
    ChildLeaveStats,
    ChildLeavesResponse,
    LeaveResponse,
    ParentReviewRequest,
)
from hostel_leave.services.leave_service import LeaveReviewService
from hostel_leave.services.review_consensus import parse_action

router = APIRouter(prefix="/parent", tags=["parent"])


@router.post("/leaves/{leave_id}/review", response_model=ApiResponse[LeaveResponse])
def review_leave(
    leave_id: int,
    review: ParentReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    leave = LeaveReviewService(db).review_as_parent(
        leave_id,
        current_user.id,
        review.action,
        review.remarks,
        review.current_location,
    )
    return ApiResponse[LeaveResponse].ok(
        LeaveResponse.model_validate(leave),
        message=f"Leave {parse_action(review.action).decision.value} by parent",
    )


@router.get("/leaves", response_model=ApiResponse[ChildLeavesResponse])
def child_leaves(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    leaves = LeaveReviewService(db).list_child_leaves(current_user.id)
    payload = ChildLeavesResponse(
        leaves=[LeaveResponse.model_validate(l) for l in leaves],
        count=len(leaves),
    )
    return ApiResponse[ChildLeavesResponse].ok(payload)


@router.get("/children/stats", response_model=ApiResponse[List[ChildLeaveStats]])
def child_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_parent),
):
    stats = LeaveReviewService(db).child_leave_stats(current_user.id)
    return ApiResponse[List[ChildLeaveStats]].ok([ChildLeaveStats(**s) for s in stats])

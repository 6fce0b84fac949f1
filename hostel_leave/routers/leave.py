from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from hostel_leave.core.schemas import ApiResponse
from hostel_leave.database import get_db
from hostel_leave.models.user import User
from hostel_leave.routers.auth_deps import require_student
from hostel_leave.schemas.leave import LeaveCreate, LeaveResponse
from hostel_leave.services.leave_service import LeaveReviewService

router = APIRouter(prefix="/leaves", tags=["leave"])


@router.post("", response_model=ApiResponse[LeaveResponse], status_code=status.HTTP_201_CREATED)
def submit_leave(
    request: LeaveCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    leave = LeaveReviewService(db).submit_leave(current_user.id, request)
    return ApiResponse[LeaveResponse].ok(LeaveResponse.model_validate(leave), message="Leave submitted")


@router.get("/mine", response_model=ApiResponse[List[LeaveResponse]])
def my_leaves(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    leaves = LeaveReviewService(db).list_student_leaves(current_user.id)
    return ApiResponse[List[LeaveResponse]].ok([LeaveResponse.model_validate(l) for l in leaves])

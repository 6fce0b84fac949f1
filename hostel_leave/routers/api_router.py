from fastapi import APIRouter
from hostel_leave.routers import admin, leave, parent, staff

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(leave.router, tags=["Leave"])
api_router.include_router(parent.router, tags=["Parent"])
api_router.include_router(staff.router, tags=["Staff"])
api_router.include_router(admin.router, tags=["Administration"])

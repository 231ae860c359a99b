# schedule_service/api/v1/api.py

from fastapi import APIRouter
from schedule_service.api.v1.endpoints import schedules

# Main router for the v1 API.
api_router = APIRouter()

api_router.include_router(schedules.router)

"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from covey_planner.presentation.api.v1.endpoints.health import router as health_router
from covey_planner.presentation.api.v1.endpoints.records import router as records_router
from covey_planner.presentation.api.v1.endpoints.events import router as events_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(records_router)
router.include_router(events_router)

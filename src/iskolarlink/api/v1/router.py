"""Primary API router definition."""

from fastapi import APIRouter

from ...models import TrackerProgram
from .trackers import build_tracker_router, programs_router

api_router = APIRouter()

for _program in TrackerProgram:
    api_router.include_router(build_tracker_router(_program))
api_router.include_router(programs_router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}

"""
Liveness probe used by the gateway and the container orchestrator.
"""

from fastapi import APIRouter

from rentals_api.app.schemas.rental import HealthRead


router = APIRouter()


@router.get("/health", response_model=HealthRead)
async def health() -> HealthRead:
    return HealthRead(status="OK")

"""
Top‑level router for version 1 of the API.

Rental routes live under ``/rental`` and the liveness probe under
``/manage``.  Update this file when new endpoint modules are added.
"""

from fastapi import APIRouter

from .endpoints import health, rentals

router = APIRouter()

router.include_router(rentals.router, prefix="/rental", tags=["rentals"])
router.include_router(health.router, prefix="/manage", tags=["manage"])

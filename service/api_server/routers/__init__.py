from __future__ import annotations

from fastapi import APIRouter

from .. import health
from . import explore


def build_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router)
    router.include_router(explore.router)
    return router

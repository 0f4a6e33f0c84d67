"""Health check endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from greenhorn import __version__
from greenhorn.api.deps import get_site_config
from greenhorn.filesystem.toml_manager import SiteConfig

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    pages: int


@router.get("/api/health", response_model=HealthResponse)
async def health_check(
    site_config: Annotated[SiteConfig, Depends(get_site_config)],
) -> HealthResponse:
    """Health check endpoint for monitoring and load balancers."""
    return HealthResponse(status="ok", version=__version__, pages=len(site_config.pages))

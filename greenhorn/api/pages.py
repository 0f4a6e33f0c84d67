"""Page endpoints: homepage, top-level pages and list items."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from greenhorn.api.deps import get_site_config
from greenhorn.filesystem.toml_manager import SiteConfig
from greenhorn.services.page_service import render_homepage, render_list_item, render_page

router = APIRouter(tags=["pages"])


def _check_segment(segment: str) -> None:
    if segment in {"", ".", ".."} or "/" in segment or "\\" in segment:
        raise HTTPException(status_code=400, detail="Invalid page name")


@router.get("/", response_class=HTMLResponse)
async def home(
    site_config: Annotated[SiteConfig, Depends(get_site_config)],
) -> HTMLResponse:
    """Render the homepage."""
    return HTMLResponse(await render_homepage(site_config))


@router.get("/{page}", response_class=HTMLResponse)
async def page_endpoint(
    page: str,
    site_config: Annotated[SiteConfig, Depends(get_site_config)],
) -> HTMLResponse:
    """Render a single page or the index of a list page."""
    _check_segment(page)
    return HTMLResponse(await render_page(site_config, page))


@router.get("/{list_name}/{item}", response_class=HTMLResponse)
async def list_item_endpoint(
    list_name: str,
    item: str,
    site_config: Annotated[SiteConfig, Depends(get_site_config)],
) -> HTMLResponse:
    """Render one file of a list page."""
    _check_segment(list_name)
    _check_segment(item)
    return HTMLResponse(await render_list_item(site_config, list_name, item))

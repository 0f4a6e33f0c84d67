"""Shared API dependencies: settings and site configuration."""

from __future__ import annotations

from fastapi import Request

from greenhorn.config import Settings
from greenhorn.filesystem.toml_manager import SiteConfig


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_site_config(request: Request) -> SiteConfig:
    """Get the site configuration loaded at startup."""
    site_config: SiteConfig = request.app.state.site_config
    return site_config

"""Shared test fixtures for Greenhorn."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from greenhorn.config import Settings
from greenhorn.filesystem.toml_manager import SiteConfig, load_site_config
from greenhorn.main import create_app

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>

<head>
    <title>{title}</title>
    <style>
{stylesheet}
    </style>
    <base href="/{title}/" />
</head>

<body>
    <header>
        <h1>A heading here</h1>
    </header>
    <article>
{body}
    </article>
    <footer>This is a footer</footer>
</body>

</html>"""

LIST_TEMPLATE = """<ul>
    {{ for entry in entries }}
    <li>
        <a href="{entry.link}">{entry.display}</a>
    </li>
    {{ endfor }}
</ul>"""

STYLESHEET = "h1   {color: blue;}"

CONFIG_TOML = """homepage = "a"
html_template = "templates/page.html"
list_template = "templates/list.html"
css = "static/style.css"

[[pages]]
name = "a"
kind = "Single"
source = "pages/a.md"

[[pages]]
name = "b"
kind = "List"
source = "pages/b"
"""


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a sample site: one single page and one list page."""
    site = tmp_path / "site"
    (site / "templates").mkdir(parents=True)
    (site / "static").mkdir()
    (site / "pages" / "b" / "drafts").mkdir(parents=True)

    (site / "templates" / "page.html").write_text(PAGE_TEMPLATE, encoding="utf-8")
    (site / "templates" / "list.html").write_text(LIST_TEMPLATE, encoding="utf-8")
    (site / "static" / "style.css").write_text(STYLESHEET, encoding="utf-8")

    (site / "pages" / "a.md").write_text(
        "# Single page test\n\nhello from the normal page\n", encoding="utf-8"
    )
    (site / "pages" / "b" / "l1.md").write_text("# List item 1\n", encoding="utf-8")
    (site / "pages" / "b" / "l2.md").write_text("# List item 2\n", encoding="utf-8")
    (site / "pages" / "b" / "drafts" / "wip.md").write_text("# Not listed\n", encoding="utf-8")

    (site / "Config.toml").write_text(CONFIG_TOML, encoding="utf-8")
    return site


@pytest.fixture
def site_config(site_dir: Path) -> SiteConfig:
    """Load and validate the sample site configuration."""
    return load_site_config(site_dir / "Config.toml")


@pytest.fixture
def test_settings(site_dir: Path) -> Settings:
    """Create test settings pointing at the sample site."""
    return Settings(
        _env_file=None,
        debug=True,
        config_file=site_dir / "Config.toml",
        static_dir=site_dir / "static",
    )


@pytest.fixture
async def client(test_settings: Settings, site_config: SiteConfig) -> AsyncGenerator[AsyncClient]:
    """Create an HTTP test client.

    ASGITransport does not run the lifespan, so the site configuration is
    placed on app state by hand.
    """
    app = create_app(test_settings)
    app.state.site_config = site_config

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

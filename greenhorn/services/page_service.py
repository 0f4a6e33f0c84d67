"""Page service: resolve configured pages and render them to HTML."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from greenhorn.exceptions import PageNotFoundError
from greenhorn.filesystem.directory import list_files, read_text
from greenhorn.filesystem.toml_manager import PageKind
from greenhorn.rendering.markdown import markdown_to_html
from greenhorn.rendering.template import render_template

if TYPE_CHECKING:
    from pathlib import Path

    from greenhorn.filesystem.toml_manager import PageDefinition, SiteConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderContext:
    """Values available to the page template."""

    title: str
    stylesheet: str
    body: str


@dataclass(frozen=True)
class ListEntry:
    """One file of a list page, as shown in the list template."""

    link: str
    display: str


def display_name(file_name: str) -> str:
    """Turn ``my_first_post.md`` into ``my first post``."""
    return file_name.split(".", 1)[0].replace("_", " ")


async def _read(path: Path) -> str:
    return await asyncio.to_thread(read_text, path)


async def _render_in_page(config: SiteConfig, title: str, body: str) -> str:
    template, stylesheet = await asyncio.gather(
        _read(config.html_template),
        _read(config.stylesheet),
    )
    context = RenderContext(title=title, stylesheet=stylesheet, body=body)
    return render_template(template, str(config.html_template), asdict(context))


async def _render_markdown_page(config: SiteConfig, title: str, source: Path) -> str:
    markdown, template, stylesheet = await asyncio.gather(
        _read(source),
        _read(config.html_template),
        _read(config.stylesheet),
    )
    context = RenderContext(
        title=title,
        stylesheet=stylesheet,
        body=markdown_to_html(markdown),
    )
    return render_template(template, str(config.html_template), asdict(context))


async def _render_list_page(config: SiteConfig, page: PageDefinition) -> str:
    file_names, list_template = await asyncio.gather(
        asyncio.to_thread(list_files, page.source),
        _read(config.list_template),
    )
    entries = [ListEntry(link=name, display=display_name(name)) for name in file_names]
    body = render_template(list_template, str(config.list_template), {"entries": entries})
    return await _render_in_page(config, page.name, body)


async def render_page(config: SiteConfig, name: str) -> str:
    """Render the page called ``name`` to a complete HTML document."""
    page = config.find(name)
    logger.debug("Rendering %s page %r from %s", page.kind, page.name, page.source)

    match page.kind:
        case PageKind.SINGLE:
            return await _render_markdown_page(config, page.name, page.source)
        case PageKind.LIST:
            return await _render_list_page(config, page)


async def render_homepage(config: SiteConfig) -> str:
    """Render the configured homepage."""
    return await render_page(config, config.homepage)


def _is_plain_file_name(item: str) -> bool:
    return bool(item) and item not in {".", ".."} and "/" not in item and "\\" not in item


async def render_list_item(config: SiteConfig, list_name: str, item: str) -> str:
    """Render one markdown file of a list page, titled with the list's name.

    The page kind is not checked: the item name is appended to whatever the
    definition's source is.
    """
    page = config.find(list_name)
    if not _is_plain_file_name(item):
        raise PageNotFoundError(f"{list_name}/{item}")

    source = page.source / item
    if not await asyncio.to_thread(source.is_file):
        raise PageNotFoundError(f"{list_name}/{item}")

    logger.debug("Rendering item %r of %r from %s", item, list_name, source)
    return await _render_markdown_page(config, page.name, source)

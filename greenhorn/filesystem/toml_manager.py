"""TOML site configuration reader: page definitions and shared resources."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from greenhorn.exceptions import ConfigError, PageNotFoundError

logger = logging.getLogger(__name__)

# First path segments owned by the HTTP layer (/static mount, /api/health)
RESERVED_PAGE_NAMES = frozenset({"static", "api"})


class PageKind(StrEnum):
    """How a page's source is interpreted."""

    SINGLE = "single"
    LIST = "list"


@dataclass(frozen=True)
class PageDefinition:
    """A page declared in the site configuration."""

    name: str
    kind: PageKind
    source: Path


@dataclass(frozen=True)
class SiteConfig:
    """Parsed site configuration, shared read-only by every render."""

    homepage: str
    html_template: Path
    list_template: Path
    stylesheet: Path
    pages: tuple[PageDefinition, ...] = field(default_factory=tuple)

    def find(self, name: str) -> PageDefinition:
        """Return the page called ``name``; the first match wins."""
        for page in self.pages:
            if page.name == name:
                return page
        raise PageNotFoundError(name)


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        msg = f"{where} missing required '{key}' field"
        raise ConfigError(msg)
    return value


def _parse_kind(raw: object, page_name: str) -> PageKind:
    try:
        return PageKind(str(raw).lower())
    except ValueError:
        msg = f"Page {page_name!r} has unknown kind {raw!r} (expected 'Single' or 'List')"
        raise ConfigError(msg) from None


def parse_site_config(config_path: Path) -> SiteConfig:
    """Parse a site configuration file.

    Relative paths are resolved against the directory holding the file.
    Raises ``ConfigError`` for unreadable files, bad TOML or missing fields.
    """
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        msg = f"Cannot read site configuration {config_path}: {exc}"
        raise ConfigError(msg) from exc
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {config_path}: {exc}"
        raise ConfigError(msg) from exc

    base_dir = config_path.parent
    where = str(config_path)

    # "css" is the historical key name
    stylesheet = data.get("stylesheet", data.get("css"))
    if not isinstance(stylesheet, str) or not stylesheet:
        msg = f"{where} missing required 'css' field"
        raise ConfigError(msg)

    pages: list[PageDefinition] = []
    raw_pages = data.get("pages", [])
    if not isinstance(raw_pages, list):
        msg = f"{where}: 'pages' must be an array of tables"
        raise ConfigError(msg)
    for page_data in raw_pages:
        if not isinstance(page_data, dict):
            msg = f"Page entry is not a table: {page_data!r}"
            raise ConfigError(msg)
        name = _require_str(page_data, "name", f"Page entry {page_data}")
        pages.append(
            PageDefinition(
                name=name,
                kind=_parse_kind(page_data.get("kind"), name),
                source=base_dir / _require_str(page_data, "source", f"Page {name!r}"),
            )
        )

    return SiteConfig(
        homepage=_require_str(data, "homepage", where),
        html_template=base_dir / _require_str(data, "html_template", where),
        list_template=base_dir / _require_str(data, "list_template", where),
        stylesheet=base_dir / stylesheet,
        pages=tuple(pages),
    )


def validate_site_config(config: SiteConfig) -> None:
    """Check startup invariants: unique names, known homepage, existing paths."""
    violations: list[str] = []

    seen: set[str] = set()
    for page in config.pages:
        if page.name in seen:
            violations.append(f"duplicate page name {page.name!r}")
        if page.name in RESERVED_PAGE_NAMES:
            violations.append(f"page name {page.name!r} is reserved")
        seen.add(page.name)

    if config.homepage not in seen:
        violations.append(f"homepage {config.homepage!r} is not a registered page")

    for label, path in (
        ("html_template", config.html_template),
        ("list_template", config.list_template),
        ("css", config.stylesheet),
    ):
        if not path.is_file():
            violations.append(f"{label} {path} is not a file")

    for page in config.pages:
        match page.kind:
            case PageKind.SINGLE:
                if not page.source.is_file():
                    violations.append(f"page {page.name!r} source {page.source} is not a file")
            case PageKind.LIST:
                if not page.source.is_dir():
                    violations.append(
                        f"page {page.name!r} source {page.source} is not a directory"
                    )

    if violations:
        joined = "; ".join(violations)
        raise ConfigError(f"Invalid site configuration: {joined}")


def load_site_config(config_path: Path) -> SiteConfig:
    """Parse and validate the site configuration. Called once at startup."""
    config = parse_site_config(config_path)
    validate_site_config(config)
    logger.info(
        "Loaded %d page(s) from %s (homepage=%s)",
        len(config.pages),
        config_path,
        config.homepage,
    )
    return config

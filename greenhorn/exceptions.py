"""Application-level exception types.

Convention:
- ``PageNotFoundError`` — the requested page, or the list item implied by a
  two-segment path, does not resolve. Mapped to 404 by the HTTP layer.
- ``InternalServerError`` subclasses (``ContentReadError``, ``TemplateError``)
  — failures whose details must never reach clients. The global handlers in
  ``greenhorn/main.py`` log the full message and return a generic 500.
- ``ConfigError`` — the site configuration is invalid. Raised only at startup.

The render pipeline raises these and never logs or retries them itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class PageNotFoundError(LookupError):
    """Raised when a page name or list item does not resolve."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Page not found: {name}")
        self.name = name


class InternalServerError(Exception):
    """Raised for internal errors whose details must not be exposed to clients."""


class ContentReadError(InternalServerError):
    """Raised when a source, template or stylesheet file cannot be read.

    The underlying ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path


class TemplateError(InternalServerError):
    """Raised when a template fails to compile or render.

    ``template`` identifies the offending template (usually its file path) and
    ``field`` the placeholder or block that caused the failure.
    """

    def __init__(self, template: str, field: str, reason: str) -> None:
        super().__init__(f"Template {template!r}, field {field!r}: {reason}")
        self.template = template
        self.field = field


class ConfigError(ValueError):
    """Raised when the site configuration file is missing or invalid."""

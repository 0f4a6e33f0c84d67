"""Minimal template engine used for page and list templates.

Grammar::

    {name}                          value of ``name``, inserted unescaped
    {entry.link}                    dotted lookup (mapping key or attribute)
    {{ for entry in entries }}      repeat the enclosed text per element,
    ...                             with ``entry`` bound to the element
    {{ endfor }}
    \\{  \\}                          literal braces

Templates are compiled once into a node tree and rendered against a context
mapping. Any failure raises ``TemplateError`` naming the template and the
offending field; rendering never returns partial output.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from greenhorn.exceptions import TemplateError

_TOKEN_RE = re.compile(r"\\([{}])|\{\{(.*?)\}\}|\{([^{}]*)\}|\{", re.DOTALL)
_PATH_RE = re.compile(r"^[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*$")
_FOR_RE = re.compile(r"^for\s+([A-Za-z_]\w*)\s+in\s+(\S+)$")
_ENDFOR = "endfor"


@dataclass(frozen=True)
class _Text:
    text: str


@dataclass(frozen=True)
class _Var:
    path: tuple[str, ...]


@dataclass(frozen=True)
class _For:
    name: str
    path: tuple[str, ...]
    body: tuple[_Node, ...]


_Node = _Text | _Var | _For

_MISSING = object()


def _parse_path(template: str, expr: str) -> tuple[str, ...]:
    if not _PATH_RE.match(expr):
        raise TemplateError(template, expr, "invalid placeholder expression")
    return tuple(expr.split("."))


def _compile(text: str, name: str) -> tuple[_Node, ...]:
    # Each frame is (open "for" header or None for the root, collected nodes)
    stack: list[tuple[tuple[str, tuple[str, ...]] | None, list[_Node]]] = [(None, [])]
    position = 0

    for match in _TOKEN_RE.finditer(text):
        nodes = stack[-1][1]
        if match.start() > position:
            nodes.append(_Text(text[position : match.start()]))
        position = match.end()

        escaped, block, expr = match.group(1), match.group(2), match.group(3)
        if escaped is not None:
            nodes.append(_Text(escaped))
        elif block is not None:
            tag = block.strip()
            if tag == _ENDFOR:
                header, body = stack.pop()
                if header is None:
                    raise TemplateError(name, tag, "'endfor' without matching 'for'")
                stack[-1][1].append(_For(header[0], header[1], tuple(body)))
                continue
            for_match = _FOR_RE.match(tag)
            if for_match is None:
                raise TemplateError(name, tag, "unknown block tag")
            header = (for_match.group(1), _parse_path(name, for_match.group(2)))
            stack.append((header, []))
        elif expr is not None:
            nodes.append(_Var(_parse_path(name, expr.strip())))
        else:
            snippet = text[match.start() : match.start() + 20]
            raise TemplateError(name, snippet, "unterminated or nested '{'")

    if position < len(text):
        stack[-1][1].append(_Text(text[position:]))

    if len(stack) > 1:
        header = stack[-1][0]
        if header is not None:
            raise TemplateError(name, f"for {header[0]}", "missing 'endfor'")
    return tuple(stack[0][1])


def _lookup_attr(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key, _MISSING)
    if key.startswith("_"):
        return _MISSING
    return getattr(value, key, _MISSING)


class Template:
    """A compiled template, safe to render repeatedly and concurrently."""

    def __init__(self, name: str, nodes: tuple[_Node, ...]) -> None:
        self.name = name
        self._nodes = nodes

    def render(self, context: Mapping[str, Any]) -> str:
        """Render the template, raising ``TemplateError`` on unknown fields."""
        parts: list[str] = []
        self._render_nodes(self._nodes, [context], parts)
        return "".join(parts)

    def _resolve(self, path: tuple[str, ...], scopes: list[Mapping[str, Any]]) -> Any:
        head, *rest = path
        value: Any = _MISSING
        for scope in reversed(scopes):
            if head in scope:
                value = scope[head]
                break
        for key in rest:
            if value is _MISSING:
                break
            value = _lookup_attr(value, key)
        if value is _MISSING:
            raise TemplateError(self.name, ".".join(path), "unknown variable")
        return value

    def _render_nodes(
        self,
        nodes: tuple[_Node, ...],
        scopes: list[Mapping[str, Any]],
        parts: list[str],
    ) -> None:
        for node in nodes:
            match node:
                case _Text(text=text):
                    parts.append(text)
                case _Var(path=path):
                    parts.append(str(self._resolve(path, scopes)))
                case _For(name=name, path=path, body=body):
                    items = self._resolve(path, scopes)
                    if isinstance(items, (str, bytes, Mapping)) or not isinstance(
                        items, Iterable
                    ):
                        raise TemplateError(
                            self.name, ".".join(path), "value is not a collection"
                        )
                    for item in items:
                        self._render_nodes(body, [*scopes, {name: item}], parts)


def compile_template(text: str, name: str) -> Template:
    """Compile template text. ``name`` identifies the template in errors."""
    return Template(name, _compile(text, name))


def render_template(text: str, name: str, context: Mapping[str, Any]) -> str:
    """Compile and render in one step."""
    return compile_template(text, name).render(context)

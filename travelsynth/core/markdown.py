"""Lightweight markdown renderer for generated travel guides.

Only the subset the guide prompt asks for is understood: ``#``/``##``/``###``
headings, ``-``/``*`` bullet lists, ``**bold**`` spans and plain paragraphs.
Lines are processed in a single forward pass with one pending list buffer.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

_BOLD_PATTERN = re.compile(r"(\*\*.*?\*\*)")

# Longest prefix first so "### " is never read as a level-1 heading.
_HEADING_PREFIXES: Tuple[Tuple[str, int], ...] = (("### ", 3), ("## ", 2), ("# ", 1))
_LIST_MARKERS: Tuple[str, ...] = ("- ", "* ")


@dataclass(frozen=True)
class TextSpan:
    text: str
    bold: bool = False


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class ListItem:
    spans: Tuple[TextSpan, ...]


@dataclass(frozen=True)
class BulletList:
    items: Tuple[ListItem, ...]


@dataclass(frozen=True)
class Paragraph:
    spans: Tuple[TextSpan, ...]


RenderNode = Union[Heading, BulletList, Paragraph]


def split_bold(text: str) -> List[TextSpan]:
    """Split ``text`` into plain and bold spans on paired ``**`` markers."""

    spans: List[TextSpan] = []
    # re.split keeps captured groups at odd indices.
    for index, part in enumerate(_BOLD_PATTERN.split(text)):
        if index % 2 == 1:
            spans.append(TextSpan(part[2:-2], bold=True))
        elif part:
            spans.append(TextSpan(part))
    return spans


def _heading(line: str) -> Heading | None:
    for prefix, level in _HEADING_PREFIXES:
        if line.startswith(prefix):
            return Heading(level=level, text=line[len(prefix):])
    return None


def parse_markdown(text: str) -> List[RenderNode]:
    """Convert markdown text into an ordered list of display blocks.

    A blank line always closes the pending list, so two runs of bullets
    separated by an empty line become two separate lists.
    """

    nodes: List[RenderNode] = []
    list_buffer: List[ListItem] = []
    in_list = False

    def flush_list() -> None:
        nonlocal in_list
        if in_list and list_buffer:
            nodes.append(BulletList(items=tuple(list_buffer)))
            list_buffer.clear()
        in_list = False

    for line in text.split("\n"):
        heading = _heading(line)
        stripped = line.strip()
        if heading is not None:
            flush_list()
            nodes.append(heading)
        elif stripped.startswith(_LIST_MARKERS):
            in_list = True
            list_buffer.append(ListItem(spans=tuple(split_bold(stripped[2:]))))
        elif not stripped:
            flush_list()
        else:
            flush_list()
            nodes.append(Paragraph(spans=tuple(split_bold(line))))

    flush_list()
    return nodes


def _spans_to_html(spans: Sequence[TextSpan]) -> str:
    rendered = []
    for span in spans:
        escaped = html.escape(span.text)
        rendered.append(f"<strong>{escaped}</strong>" if span.bold else escaped)
    return "".join(rendered)


def render_html(nodes: Sequence[RenderNode]) -> str:
    """Project display blocks onto escaped HTML for the result card."""

    chunks: List[str] = []
    for node in nodes:
        if isinstance(node, Heading):
            chunks.append(f"<h{node.level}>{html.escape(node.text)}</h{node.level}>")
        elif isinstance(node, BulletList):
            items = "".join(f"<li>{_spans_to_html(item.spans)}</li>" for item in node.items)
            chunks.append(f"<ul>{items}</ul>")
        else:
            chunks.append(f"<p>{_spans_to_html(node.spans)}</p>")
    return "\n".join(chunks)


def markdown_to_html(text: str) -> str:
    return render_html(parse_markdown(text))


__all__ = [
    "BulletList",
    "Heading",
    "ListItem",
    "Paragraph",
    "RenderNode",
    "TextSpan",
    "markdown_to_html",
    "parse_markdown",
    "render_html",
    "split_bold",
]

"""HTML helper utilities shared by the parsers."""

from __future__ import annotations

import re

TAG_RE = re.compile(r"<[^>]+>")
NBSP_RE = re.compile(r"&nbsp;?")
WS_RE = re.compile(r"\s+")


def strip_tags(html: str) -> str:
    return TAG_RE.sub("", html)


def clean_cell(text: str) -> str:
    text = strip_tags(text)
    text = NBSP_RE.sub(" ", text)
    text = WS_RE.sub(" ", text).strip()
    return text


def cell_text(cell) -> str:
    """Whitespace-normalized text of a BeautifulSoup cell (``""`` for None)."""
    return clean_cell(cell.get_text(" ", strip=True)) if cell is not None else ""


def has_link(cell) -> bool:
    return cell is not None and cell.find("a") is not None

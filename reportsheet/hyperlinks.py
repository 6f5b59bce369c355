"""Hyperlink cell data and the rules for turning strings into links."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

STRING_MAX = 32767

_URL_PATTERN = re.compile(r"^([fh]tt?ps?://)|(mailto:)|(file://)")


class LinkType(Enum):
    EXTERNAL = auto()
    INTERNAL = auto()


@dataclass
class Hyperlink:
    """A hyperlink attached to a cell."""

    link_type: LinkType = LinkType.EXTERNAL
    target: str = ""
    location: str = ""
    display: str = ""
    tooltip: str = ""


def looks_like_url(text: str) -> bool:
    """True when a written string should be stored as a hyperlink."""
    return _URL_PATTERN.search(text) is not None


def display_text(url: str, display: str = "") -> str:
    """Return the text shown in a hyperlink cell."""
    text = display or url
    if text.startswith("mailto:"):
        text = text.replace("mailto:", "")
    return text[:STRING_MAX]


def split_fragment(url: str) -> tuple[str, str]:
    """Split a URL into the part before '#' and the fragment after it."""
    base, _, fragment = url.partition("#")
    return base, fragment
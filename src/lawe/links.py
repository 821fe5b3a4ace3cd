"""Link target classification for ``[[target|label]]`` links.

The lexer only marks where a link starts, splits and ends; these helpers
decide what the text between ``[[`` and ``|``/``]]`` points at.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote

from lawe.tokens import Token, TokenKind


class LinkType(Enum):
    EXTERNAL = "external"
    INTERNAL = "internal"
    ANCHOR = "anchor"


@dataclass(frozen=True, slots=True)
class LinkTarget:
    is_valid: bool
    type: LinkType
    namespace: str | None = None
    page: str | None = None
    anchor: str | None = None
    interwiki_prefix: str | None = None
    interwiki_id: str | None = None
    error: str | None = None


# prefix -> URL template, {id} is replaced by the percent-encoded identifier
INTERWIKI_PREFIXES: dict[str, str] = {
    "wp": "https://en.wikipedia.org/wiki/{id}",
    "yt": "https://www.youtube.com/watch?v={id}",
}

_EXTERNAL_URL_RE = re.compile(r"https?://")
_INTERNAL_LINK_RE = re.compile(r"[a-zA-Z0-9_\-/:#]+")
_INTERWIKI_RE = re.compile(r"([a-z]+)>(.+)")


def validate_link_target(target: str) -> LinkTarget:
    """Classify *target* as an interwiki, external, anchor or internal link."""
    trimmed = target.strip()
    if not trimmed:
        return LinkTarget(False, LinkType.INTERNAL, error="Empty link target")

    m = _INTERWIKI_RE.fullmatch(trimmed)
    if m:
        prefix, ident = m.group(1), m.group(2).strip()
        if prefix not in INTERWIKI_PREFIXES:
            return LinkTarget(False, LinkType.EXTERNAL, error=f"Unknown wiki prefix: {prefix}")
        if not ident:
            return LinkTarget(False, LinkType.EXTERNAL, error=f"Empty {prefix} identifier")
        return LinkTarget(True, LinkType.EXTERNAL, interwiki_prefix=prefix, interwiki_id=ident)

    if _EXTERNAL_URL_RE.match(trimmed):
        return LinkTarget(True, LinkType.EXTERNAL)

    if trimmed.startswith("#"):
        anchor = trimmed[1:]
        if not anchor:
            return LinkTarget(False, LinkType.ANCHOR, error="Empty anchor")
        return LinkTarget(True, LinkType.ANCHOR, anchor=anchor)

    if not _INTERNAL_LINK_RE.fullmatch(trimmed):
        return LinkTarget(False, LinkType.INTERNAL, error="Invalid characters in internal link")

    link_part, *rest = trimmed.split("#")
    anchor = rest[0] if rest else ""
    namespace, _, page = link_part.rpartition("/")
    if not page and not anchor:
        return LinkTarget(False, LinkType.INTERNAL, error="Missing page name")

    return LinkTarget(
        True,
        LinkType.INTERNAL,
        namespace=namespace or None,
        page=page or None,
        anchor=anchor or None,
    )


def normalize_internal_link(target: str) -> str:
    """Strip a leading slash and collapse repeated slashes in internal links.

    Anything that is not a valid internal link is returned unchanged.
    """
    info = validate_link_target(target)
    if not info.is_valid or info.type is not LinkType.INTERNAL:
        return target
    normalized = target.strip().removeprefix("/")
    return re.sub(r"/+", "/", normalized)


def interwiki_url(prefix: str, ident: str) -> str | None:
    """Return the URL for an interwiki link, or None for an unknown prefix."""
    template = INTERWIKI_PREFIXES.get(prefix.lower())
    if template is None:
        return None
    return template.replace("{id}", quote(ident, safe="!*'()"))


def link_targets(tokens: Iterable[Token]) -> Iterator[tuple[Token, str]]:
    """Yield ``(LINK_OPEN token, target text)`` for each link that reaches ``|`` or ``]]``."""
    opener: Token | None = None
    parts: list[str] = []
    for token in tokens:
        if token.kind is TokenKind.LINK_OPEN:
            opener, parts = token, []
        elif opener is None:
            continue
        elif token.kind in (TokenKind.LINK_PIPE, TokenKind.LINK_CLOSE):
            yield opener, "".join(parts)
            opener = None
        else:
            parts.append(token.text)

"""Token stream dumps for --format text and --format json."""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

from lawe.tokens import Token


def token_to_dict(token: Token) -> dict[str, Any]:
    """Plain-data form of a token; optional fields appear only when set."""
    data: dict[str, Any] = {
        "kind": token.kind.name,
        "text": token.text,
        "line": token.position.line,
        "column": token.position.column,
    }
    if token.attributes is not None:
        data["attributes"] = dict(token.attributes)
    if token.callout_kind is not None:
        data["callout_kind"] = token.callout_kind.value
        data["callout_title"] = token.callout_title
    return data


def tokens_to_json(tokens: list[Token], *, indent: int | None = 2) -> str:
    return json.dumps([token_to_dict(t) for t in tokens], indent=indent, ensure_ascii=False)


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one ``line:col KIND 'text'`` row per token to *file*."""
    width = max((len(str(t.position)) for t in tokens), default=0)
    f = file
    for token in tokens:
        f.write(f"{str(token.position):<{width}} {token.kind.name} {token.text!r}")
        if token.callout_kind is not None:
            f.write(f" callout={token.callout_kind.value} title={token.callout_title!r}")
        if token.attributes is not None:
            attrs = " ".join(f"{k}={v!r}" for k, v in token.attributes.items())
            f.write(f" {attrs}")
        f.write("\n")

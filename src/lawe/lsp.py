"""Minimal LSP server for LAWE markup: lexer, unclosed-marker and link diagnostics."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from lawe.errors import LexError
from lawe.lexer import Lexer
from lawe.links import link_targets, validate_link_target
from lawe.tokens import CLOSING_KIND, Token

server = LanguageServer("lawe-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _unclosed_diagnostic(token: Token) -> Diagnostic:
    line = token.position.line - 1
    col = token.position.column - 1
    closing = CLOSING_KIND[token.kind].name
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + max(1, len(token.text))),
        ),
        message=f"unclosed {token.kind.name} {token.text!r} (no matching {closing})",
        severity=DiagnosticSeverity.Warning,
        source="lawe",
    )


def _link_diagnostic(opener: Token, target: str, error: str) -> Diagnostic:
    line = opener.position.line - 1
    col = opener.position.column - 1
    width = len(opener.text) + (0 if "\n" in target else len(target))
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + width),
        ),
        message=f"invalid link target {target.strip()!r}: {error}",
        severity=DiagnosticSeverity.Warning,
        source="lawe",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Tokenize the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    lexer = Lexer(source, filename)
    try:
        tokens = lexer.tokenize()
    except LexError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + exc.underline_length),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="lawe",
            )
        )
    else:
        diagnostics.extend(_unclosed_diagnostic(t) for t in lexer.unclosed)
        for opener, target in link_targets(tokens):
            info = validate_link_target(target)
            if not info.is_valid:
                diagnostics.append(_link_diagnostic(opener, target, info.error or "invalid"))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()

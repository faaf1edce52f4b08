"""Minimal LSP server for calculator documents: diagnostics only."""

from __future__ import annotations

from collections.abc import Mapping

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

from uuscan import __version__
from uuscan.calc import Calculator
from uuscan.errors import ScanError

server = LanguageServer("uuscan-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def line_diagnostics(source: str, env: Mapping[str, str] | None = None) -> list[Diagnostic]:
    """Evaluate each non-blank line and turn scan errors into diagnostics."""
    calc = Calculator(env)
    diagnostics: list[Diagnostic] = []

    for idx, line in enumerate(source.splitlines()):
        if not line.strip():
            continue
        try:
            calc.evaluate(line)
        except ScanError as exc:
            col = max(0, exc.position - 1)
            diagnostics.append(
                Diagnostic(
                    range=Range(
                        start=Position(line=idx, character=col),
                        end=Position(line=idx, character=col + 1),
                    ),
                    message=exc.message,
                    severity=DiagnosticSeverity.Error,
                    source="uuscan",
                )
            )

    return diagnostics


def _validate(ls: LanguageServer, uri: str) -> None:
    """Check the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics = line_diagnostics(doc.source)
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

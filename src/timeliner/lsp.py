"""Minimal LSP server for timeline files — diagnostics only."""

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

from timeliner import __version__
from timeliner.errors import GenerationError, LexError, ParseError
from timeliner.generator import generate
from timeliner.parser import parse
from timeliner.tokens import Span

server = LanguageServer(
    "timeliner-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _range(span: Span) -> Range:
    # Lines are 1-based in spans, columns already 0-based
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column),
        end=Position(line=span.end.line - 1, character=span.end.column),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the parse/generate pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        program = parse(source, source_file=filename)
    except LexError as exc:
        line = exc.position.line - 1
        col = exc.position.column
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="timeliner",
            )
        )
    except ParseError as exc:
        diagnostics.append(
            Diagnostic(
                range=_range(exc.span),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="timeliner",
            )
        )
    else:
        try:
            generate(program)
        except GenerationError as exc:
            span = exc.span if exc.span is not None else program.span
            diagnostics.append(
                Diagnostic(
                    range=_range(span),
                    message=exc.message,
                    severity=DiagnosticSeverity.Warning,
                    source="timeliner",
                )
            )

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

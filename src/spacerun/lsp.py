"""Minimal LSP server for spacerun: diagnostics and quick fixes."""

from __future__ import annotations

from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_CODE_ACTION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    CodeAction,
    CodeActionKind,
    CodeActionOptions,
    CodeActionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
    TextEdit,
    WorkspaceEdit,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import TextDocument

from spacerun import __version__, report
from spacerun.config import load_config
from spacerun.errors import LexError, ParseError
from spacerun.index import TokenIndex
from spacerun.parser import parse
from spacerun.rule import Options, check
from spacerun.tokens import Position as SourcePosition
from spacerun.tokens import Span

server = LanguageServer("spacerun-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)

# Options used for every document; main() loads them from spacerun.toml
options = Options()


def _range(doc: TextDocument, span: Span) -> Range:
    """Convert a 1-based span into a 0-based LSP range in the client's units.

    Span columns count code points; the document's position codec converts
    them to the negotiated encoding (UTF-16 unless the client says otherwise).
    """
    rng = Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )
    return doc.position_codec.range_to_client_units(doc.lines, rng)


def _lint(source: str) -> list[report.Diagnostic]:
    doc = parse(source)
    return check(source, doc.comments, TokenIndex.from_document(doc), options)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the rule and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    try:
        findings = _lint(doc.source)
    except LexError as exc:
        pos = exc.position
        after = SourcePosition(pos.line, pos.column + 1, pos.offset + 1)
        diagnostics.append(
            Diagnostic(
                range=_range(doc, Span(pos, after)),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="spacerun",
            )
        )
    except ParseError as exc:
        diagnostics.append(
            Diagnostic(
                range=_range(doc, exc.span),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="spacerun",
            )
        )
    else:
        for finding in findings:
            diagnostics.append(
                Diagnostic(
                    range=_range(doc, finding.run_span),
                    message=finding.message,
                    severity=DiagnosticSeverity.Warning,
                    source="spacerun",
                )
            )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _code_actions(ls: LanguageServer, params: CodeActionParams) -> list[CodeAction]:
    """Offer a quick fix per finding on the requested lines, plus a fix-all."""
    uri = params.text_document.uri
    doc = ls.workspace.get_text_document(uri)
    try:
        findings = _lint(doc.source)
    except (LexError, ParseError):
        return []

    first = params.range.start.line
    last = params.range.end.line
    actions: list[CodeAction] = []
    for finding in findings:
        if finding.fix is None:
            continue
        rng = _range(doc, finding.run_span)
        if not first <= rng.start.line <= last:
            continue
        actions.append(
            CodeAction(
                title=f"Collapse spaces before '{finding.value}'",
                kind=CodeActionKind.QuickFix,
                edit=WorkspaceEdit(changes={uri: [TextEdit(range=rng, new_text=finding.fix.text)]}),
            )
        )

    edits = [
        TextEdit(range=_range(doc, f.run_span), new_text=f.fix.text) for f in findings if f.fix is not None
    ]
    if edits:
        actions.append(
            CodeAction(
                title="Collapse all multiple spaces",
                kind=CodeActionKind.SourceFixAll,
                edit=WorkspaceEdit(changes={uri: edits}),
            )
        )
    return actions


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(
    TEXT_DOCUMENT_CODE_ACTION,
    CodeActionOptions(code_action_kinds=[CodeActionKind.QuickFix, CodeActionKind.SourceFixAll]),
)
def code_action(ls: LanguageServer, params: CodeActionParams) -> list[CodeAction]:
    return _code_actions(ls, params)


def main() -> None:
    global options
    options = Options.from_mapping(load_config(None, Path.cwd()))
    server.start_io()

"""Minimal LSP server for templates: tag/attribute completion and attribute diagnostics."""

from __future__ import annotations

import re
import sys
from pathlib import Path

from loguru import logger
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
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

from taglookup.lookup import TaglibLookup
from taglookup.resolve import WILDCARD
from taglookup.types import Attribute, Tag

# An opening tag: name, then everything up to the closing '>'
_OPEN_TAG = re.compile(r"<([A-Za-z][\w:.-]*)([^<>]*)>")
_ATTRIBUTE = re.compile(r"""([^\s=/"'<>]+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+))?""")
# Text before the cursor that is still inside an unclosed '<'
_PARTIAL_TAG = re.compile(r"<([A-Za-z][\w:.-]*)?(\s[^<>]*)?$")


class TaglibServer(LanguageServer):
    """Language server bound to one tag-library lookup."""

    def __init__(self, *args, lookup: TaglibLookup | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.lookup = lookup if lookup is not None else TaglibLookup()


server = TaglibServer("taglookup-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _position_at(source: str, offset: int) -> Position:
    line = source.count("\n", 0, offset)
    line_start = source.rfind("\n", 0, offset) + 1
    return Position(line=line, character=offset - line_start)


def _offset_at(source: str, position: Position) -> int:
    lines = source.splitlines(keepends=True)
    offset = sum(len(line) for line in lines[: position.line])
    return min(offset + position.character, len(source))


def _validate(ls: TaglibServer, uri: str) -> None:
    """Check attributes of known tags and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    lookup = ls.lookup
    diagnostics: list[Diagnostic] = []

    for match in _OPEN_TAG.finditer(source):
        tag_name = match.group(1)
        if lookup.get_tag(tag_name) is None:
            continue
        attrs_start = match.start(2)
        for attr_match in _ATTRIBUTE.finditer(match.group(2)):
            attr_name = attr_match.group(1)
            if lookup.resolve_attribute(tag_name, attr_name) is not None:
                continue
            start = attrs_start + attr_match.start(1)
            end = attrs_start + attr_match.end(1)
            diagnostics.append(
                Diagnostic(
                    range=Range(start=_position_at(source, start), end=_position_at(source, end)),
                    message=f"unknown attribute '{attr_name}' on <{tag_name}>",
                    severity=DiagnosticSeverity.Warning,
                    source="taglookup",
                )
            )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _complete(ls: TaglibServer, params: CompletionParams) -> CompletionList:
    """Offer tag names after '<' and attribute names inside an opening tag."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    source = doc.source
    before = source[: _offset_at(source, params.position)]
    items: list[CompletionItem] = []

    match = _PARTIAL_TAG.search(before)
    if match is None:
        return CompletionList(is_incomplete=False, items=items)

    tag_name, rest = match.group(1), match.group(2)
    if rest is None:
        prefix = tag_name or ""
        for tag in ls.lookup.get_sorted_tags():
            if tag.name != WILDCARD and tag.name.startswith(prefix):
                items.append(
                    CompletionItem(
                        label=tag.name,
                        kind=CompletionItemKind.Class,
                        detail=tag.description,
                    )
                )
        return CompletionList(is_incomplete=False, items=items)

    seen: set[str] = set()

    def add(attribute: Attribute, tag: Tag) -> None:
        # Pattern and wildcard attributes have no single name to insert
        name = attribute.name
        if attribute.pattern is not None or not name or name == WILDCARD or name in seen:
            return
        seen.add(name)
        items.append(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Property,
                detail=attribute.type,
                documentation=attribute.description,
            )
        )

    ls.lookup.for_each_applicable_attribute(tag_name, add)
    return CompletionList(is_incomplete=False, items=items)


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: TaglibServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: TaglibServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["<", " "]))
def completion(ls: TaglibServer, params: CompletionParams) -> CompletionList:
    return _complete(ls, params)


def main(argv: list[str] | None = None) -> None:
    """Start the server over stdio with the descriptors named in *argv*."""
    from taglookup.descriptor import load_library

    logger.remove()
    logger.add(sys.stderr, level="INFO", format="{level}: {message}")
    logger.enable("taglookup")

    paths = sys.argv[1:] if argv is None else argv
    for path in paths:
        server.lookup.register(load_library(Path(path)))
    logger.info(f"Serving {server.lookup.describe()}")
    server.start_io()

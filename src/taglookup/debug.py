"""--debug dump of a lookup's merged namespace to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from taglookup.lookup import TaglibLookup
from taglookup.types import Attribute, Tag


def dump_lookup(lookup: TaglibLookup, *, file: TextIO | None = None) -> None:
    """Print a human-readable tree of the lookup to *file* (default: stderr)."""
    f = file if file is not None else sys.stderr
    f.write(f"Lookup ({len(lookup.libraries)} libraries, {len(lookup)} tags)\n")
    for library in lookup.libraries:
        source = f" [{library.path}]" if library.path else ""
        f.write(f"{_indent(1)}Library {library.id}{source}\n")
        if library.migrator_path:
            f.write(f"{_indent(2)}Migrator {library.migrator_path}\n")
    for tag in lookup.get_sorted_tags():
        _dump_tag(tag, 1, f)
    ns = lookup.namespace
    for name, attribute in ns.attributes.items():
        f.write(f"{_indent(1)}Shared {name}: ")
        _dump_attribute_inline(attribute, f)
        f.write("\n")
    for name, group in ns.attribute_groups.items():
        f.write(f"{_indent(1)}Group {name}\n")
        for attribute in group.values():
            _dump_attribute(attribute, 2, f)
    for transformer in ns.text_transformers:
        f.write(f"{_indent(1)}TextTransformer {transformer.path} priority={transformer.priority}\n")


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_tag(tag: Tag, depth: int, f: TextIO) -> None:
    parent = f" (in <{tag.parent_tag_name}>)" if tag.parent_tag_name else ""
    f.write(f"{_indent(depth)}Tag <{tag.name}>{parent}\n")
    for attribute in tag.attributes.values():
        _dump_attribute(attribute, depth + 1, f)
    for group_name in tag.attribute_groups:
        f.write(f"{_indent(depth + 1)}Group {group_name}\n")
    for attribute in tag.pattern_attributes:
        _dump_attribute(attribute, depth + 1, f)
    for transformer in tag.transformers:
        f.write(
            f"{_indent(depth + 1)}Transformer {transformer.path} priority={transformer.priority}\n"
        )
    for migrator in tag.migrators:
        f.write(f"{_indent(depth + 1)}Migrator {getattr(migrator, '__qualname__', migrator)}\n")


def _dump_attribute(attribute: Attribute, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}Attr ")
    _dump_attribute_inline(attribute, f)
    f.write("\n")


def _dump_attribute_inline(attribute: Attribute, f: TextIO) -> None:
    if attribute.ref:
        f.write(f"{attribute.name}=&{attribute.ref}")
    elif attribute.pattern is not None:
        f.write(f"/{attribute.pattern.pattern}/")
    else:
        f.write(f"{attribute.name}")
    if attribute.type:
        f.write(f": {attribute.type}")

"""Register nested tag declarations under their fully qualified names."""

from __future__ import annotations

import dataclasses

from loguru import logger

from taglookup.types import Tag, TagLibrary


def flatten_nested_tags(library: TagLibrary, tags: dict[str, Tag]) -> int:
    """Insert every nested tag of *library* into *tags* as ``parent:child``.

    Walks the library's own declarations, not the merged namespace, so a
    nested tag is only flattened by the registration that declared it.
    Returns the number of tags added.
    """
    count = 0

    def visit(tag: Tag, parent_name: str) -> None:
        nonlocal count
        for nested in tag.nested_tags.values():
            qualified = f"{parent_name}:{nested.name}"
            copy = dataclasses.replace(nested, name=qualified, parent_tag_name=parent_name)
            tags[qualified] = copy
            count += 1
            logger.trace(f"Flattened nested tag <{qualified}>")
            visit(copy, qualified)

    for tag in library.tags.values():
        visit(tag, tag.name)
    return count

"""Selection and ordering of transformer and migrator chains."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import Any

from taglookup.errors import InvalidMigratorError, InvalidTransformerError
from taglookup.resolve import WILDCARD
from taglookup.types import Namespace, TagLibrary, Transformer


def priority_key(transformer: Transformer) -> float:
    """Sort key: ascending priority, undeclared priority last."""
    if transformer.priority is None:
        return math.inf
    return transformer.priority


def _checked_transformers(
    entries: Iterable[Any], tag_name: str | None = None
) -> list[Transformer]:
    result: list[Transformer] = []
    for entry in entries:
        if not isinstance(entry, Transformer) or not entry.path:
            raise InvalidTransformerError(entry, tag_name)
        result.append(entry)
    return result


def tag_transformers(ns: Namespace, tag_name: str) -> list[Transformer]:
    """Transformers for *tag_name* then the wildcard tag, stably sorted by priority."""
    collected: list[Transformer] = []
    for name in _tag_and_wildcard(tag_name):
        tag = ns.tags.get(name)
        if tag is not None:
            collected.extend(_checked_transformers(tag.transformers, name))
    return sorted(collected, key=priority_key)


def tag_migrators(ns: Namespace, tag_name: str) -> list[Callable[..., Any]]:
    """Migrators for *tag_name* then the wildcard tag, in declaration order."""
    migrators: list[Callable[..., Any]] = []
    for name in _tag_and_wildcard(tag_name):
        tag = ns.tags.get(name)
        if tag is None:
            continue
        for migrator in tag.migrators:
            if not callable(migrator):
                raise InvalidMigratorError(migrator, name)
            migrators.append(migrator)
    return migrators


def template_transformers(ns: Namespace) -> list[Transformer]:
    """Text transformers of every library, stably sorted by priority."""
    return sorted(_checked_transformers(ns.text_transformers), key=priority_key)


def library_transformers(ns: Namespace) -> list[Transformer]:
    """Template-scoped transformers in collection order."""
    return _checked_transformers(ns.transformers)


def template_migrators(libraries: Iterable[TagLibrary]) -> list[str]:
    """Migrator paths of the given libraries, skipping those without one."""
    return [lib.migrator_path for lib in libraries if lib.migrator_path]


def _tag_and_wildcard(tag_name: str) -> tuple[str, ...]:
    if not tag_name:
        return (WILDCARD,)
    return (tag_name, WILDCARD)

"""The tag-library lookup: one merged, queryable view over many tag libraries."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any

from loguru import logger

from taglookup import chains
from taglookup.errors import InvalidTaglibError
from taglookup.flatten import flatten_nested_tags
from taglookup.index import TagIndex
from taglookup.merge import merge_library
from taglookup.resolve import for_each_applicable_attribute, resolve_attribute
from taglookup.types import (
    Attribute,
    AttrRef,
    Namespace,
    Tag,
    TagLibrary,
    TagRef,
    Transformer,
    attr_name_of,
    tag_name_of,
)


class TaglibLookup:
    """Merges registered tag libraries into a single fast lookup.

    Libraries are registered during a startup phase and queried many times
    afterwards. Registration is not synchronized; callers must not register
    while other threads query.
    """

    def __init__(self) -> None:
        self.namespace = Namespace()
        self._libraries: dict[str, TagLibrary] = {}
        self._index = TagIndex(self.namespace)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def has_library(self, library: TagLibrary) -> bool:
        return library.id in self._libraries

    @property
    def libraries(self) -> tuple[TagLibrary, ...]:
        """Registered libraries in registration order."""
        return tuple(self._libraries.values())

    def register(self, library: TagLibrary) -> None:
        """Merge *library* into the lookup. Registering a known id is a no-op."""
        if library is None:
            raise InvalidTaglibError('"library" is required')
        if not getattr(library, "id", None):
            raise InvalidTaglibError('"library.id" expected', getattr(library, "path", None))

        if library.id in self._libraries:
            logger.debug(f"Tag library {library.id} already registered, skipping")
            return

        # Merge into a staged copy so a malformed library leaves no trace
        staged = dataclasses.replace(self.namespace)
        merge_library(staged, library)
        nested = flatten_nested_tags(library, staged.tags)

        for f in dataclasses.fields(Namespace):
            setattr(self.namespace, f.name, getattr(staged, f.name))
        self._libraries[library.id] = library
        self._index.invalidate()
        logger.debug(
            f"Registered tag library {library.id} "
            f"({len(library.tags)} tags, {nested} nested)"
        )

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def get_tag(self, tag: TagRef) -> Tag | None:
        return self._index.get(tag_name_of(tag))

    def get_sorted_tags(self) -> tuple[Tag, ...]:
        """All tags ordered by name; the same tuple is returned until the next registration."""
        return self._index.sorted_tags()

    def for_each_tag(self, visit: Callable[[Tag], Any]) -> None:
        """Visit every tag in registration order. Return ``STOP`` from *visit* to end early."""
        self._index.for_each(visit)

    def __len__(self) -> int:
        return len(self.namespace.tags)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def resolve_attribute(self, tag: TagRef, attr: AttrRef) -> Attribute | None:
        return resolve_attribute(self.namespace, tag_name_of(tag), attr_name_of(attr))

    def for_each_applicable_attribute(
        self, tag: TagRef, visit: Callable[[Attribute, Tag], Any]
    ) -> None:
        for_each_applicable_attribute(self.namespace, tag_name_of(tag), visit)

    # ------------------------------------------------------------------
    # Rewrite chains
    # ------------------------------------------------------------------

    def for_each_tag_transformer(
        self, tag: TagRef, visit: Callable[[Transformer], Any]
    ) -> None:
        for transformer in chains.tag_transformers(self.namespace, tag_name_of(tag)):
            visit(transformer)

    def for_each_tag_migrator(
        self, tag: TagRef, visit: Callable[[Callable[..., Any]], Any]
    ) -> None:
        for migrator in chains.tag_migrators(self.namespace, tag_name_of(tag)):
            visit(migrator)

    def for_each_template_transformer(self, visit: Callable[[Transformer], Any]) -> None:
        for transformer in chains.template_transformers(self.namespace):
            visit(transformer)

    def for_each_library_transformer(self, visit: Callable[[Transformer], Any]) -> None:
        for transformer in chains.library_transformers(self.namespace):
            visit(transformer)

    def for_each_template_migrator(self, visit: Callable[[str], Any]) -> None:
        for migrator_path in chains.template_migrators(self._libraries.values()):
            visit(migrator_path)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def describe(self) -> str:
        return "lookup: " + ", ".join(self._libraries)

    def __str__(self) -> str:
        return self.describe()

"""Ordered views over the unified tag mapping."""

from __future__ import annotations

import locale
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from taglookup.types import STOP, Namespace, Tag


@dataclass
class TagIndex:
    """Tag access plus a sorted-tag cache keyed on a registration version."""

    namespace: Namespace
    version: int = 0
    _sorted: tuple[Tag, ...] = field(default=(), init=False)
    _sorted_version: int = field(default=-1, init=False)

    def invalidate(self) -> None:
        """Mark the sorted view stale; called on every successful registration."""
        self.version += 1

    def sorted_tags(self) -> tuple[Tag, ...]:
        """Return all tags ordered by name. Recomputed only when stale."""
        if self._sorted_version != self.version:
            self._sorted = tuple(
                sorted(self.namespace.tags.values(), key=lambda t: locale.strxfrm(t.name))
            )
            self._sorted_version = self.version
        return self._sorted

    def for_each(self, visit: Callable[[Tag], Any]) -> None:
        """Visit tags in insertion order until *visit* returns ``STOP``."""
        for tag in list(self.namespace.tags.values()):
            if visit(tag) is STOP:
                break

    def get(self, name: str) -> Tag | None:
        return self.namespace.tags.get(name)

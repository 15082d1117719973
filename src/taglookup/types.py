"""Record types for tag libraries and the unified namespace."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Protocol


class Visit(Enum):
    """Values a visitor may return to steer iteration."""

    STOP = auto()


STOP = Visit.STOP


class HasTagName(Protocol):
    """Element handle exposing a ``tag_name``."""

    tag_name: str


class HasName(Protocol):
    """Attribute handle exposing a ``name``."""

    name: str


TagRef = str | HasTagName
AttrRef = str | HasName


def tag_name_of(ref: TagRef) -> str:
    """Normalize a tag name or element handle to a plain name."""
    if isinstance(ref, str):
        return ref
    return ref.tag_name


def attr_name_of(ref: AttrRef) -> str:
    """Normalize an attribute name or handle to a plain name."""
    if isinstance(ref, str):
        return ref
    return ref.name


@dataclass(slots=True)
class Attribute:
    """An attribute a tag accepts, matched by name, by pattern, or via ``ref``."""

    name: str | None = None
    ref: str | None = None
    pattern: re.Pattern[str] | None = None
    type: str | None = None
    description: str | None = None
    required: bool | None = None
    default_value: Any = None
    deprecated: bool | None = None
    no_merge: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            self.pattern = re.compile(self.pattern)

    def matches(self, attr_name: str) -> bool:
        return self.pattern is not None and self.pattern.search(attr_name) is not None


@dataclass(slots=True)
class Transformer:
    """A compile-time rewrite step identified by ``path``."""

    path: str
    priority: float | None = None


@dataclass(slots=True)
class Tag:
    """A custom tag definition."""

    name: str
    attributes: dict[str, Attribute] = field(default_factory=dict)
    attribute_groups: list[str] = field(default_factory=list)
    pattern_attributes: list[Attribute] = field(default_factory=list)
    nested_tags: dict[str, Tag] = field(default_factory=dict)
    transformers: list[Transformer] = field(default_factory=list)
    migrators: list[Callable[..., Any]] = field(default_factory=list)
    parent_tag_name: str | None = None
    description: str | None = None
    renderer: str | None = None
    open_tag_only: bool | None = None
    deprecated: bool | None = None
    taglib_id: str | None = None
    no_merge: bool = False


@dataclass(slots=True)
class TagLibrary:
    """A bundle of tag, attribute and rewrite-step declarations from one source."""

    id: str
    tags: dict[str, Tag] = field(default_factory=dict)
    attributes: dict[str, Attribute] = field(default_factory=dict)
    pattern_attributes: list[Attribute] = field(default_factory=list)
    attribute_groups: dict[str, dict[str, Attribute]] = field(default_factory=dict)
    transformers: list[Transformer] = field(default_factory=list)
    text_transformers: list[Transformer] = field(default_factory=list)
    migrator_path: str | None = None
    path: str | None = None


@dataclass(slots=True)
class Namespace:
    """Union of every registered library's declarations."""

    tags: dict[str, Tag] = field(default_factory=dict)
    transformers: list[Transformer] = field(default_factory=list)
    text_transformers: list[Transformer] = field(default_factory=list)
    attributes: dict[str, Attribute] = field(default_factory=dict)
    pattern_attributes: list[Attribute] = field(default_factory=list)
    attribute_groups: dict[str, dict[str, Attribute]] = field(default_factory=dict)

"""Shared test fixtures and helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from taglookup.lookup import TaglibLookup
from taglookup.types import Attribute, Tag, TagLibrary, Transformer


@pytest.fixture
def lookup() -> TaglibLookup:
    """Return an empty lookup."""
    return TaglibLookup()


@pytest.fixture
def write_taglib(tmp_path: Path):
    """Return a helper that writes a TOML descriptor and returns its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def attr(name: str, **kwargs) -> Attribute:
    return Attribute(name=name, **kwargs)


def tag(name: str, *attr_names: str, **kwargs) -> Tag:
    """Build a Tag with plain attributes named *attr_names*."""
    attributes = kwargs.pop("attributes", {})
    for attr_name in attr_names:
        attributes[attr_name] = Attribute(name=attr_name)
    return Tag(name=name, attributes=attributes, **kwargs)


def library(taglib_id: str, *tags: Tag, **kwargs) -> TagLibrary:
    """Build a TagLibrary keyed by tag name."""
    return TagLibrary(id=taglib_id, tags={t.name: t for t in tags}, **kwargs)


def transformer(path: str, priority: float | None = None) -> Transformer:
    return Transformer(path=path, priority=priority)


def names(tags) -> list[str]:
    """Extract tag names, preserving order."""
    return [t.name for t in tags]

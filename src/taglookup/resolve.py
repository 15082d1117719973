"""Attribute resolution: exact, group and pattern tiers with ``ref`` indirection."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from taglookup.types import Attribute, Namespace, Tag

WILDCARD = "*"


def find_attribute_for_tag(ns: Namespace, tag: Tag, attr_name: str) -> Attribute | None:
    """Look up *attr_name* on a single tag: direct, then groups, then patterns."""
    attribute = tag.attributes.get(attr_name)
    if attribute is None:
        for group_name in tag.attribute_groups:
            group = ns.attribute_groups.get(group_name)
            if group is not None:
                attribute = group.get(attr_name)
                if attribute is not None:
                    break

    # The wildcard name is an exact key, never a pattern subject
    if attribute is None and attr_name != WILDCARD:
        for pattern_attribute in tag.pattern_attributes:
            if pattern_attribute.matches(attr_name):
                attribute = pattern_attribute
                break

    return attribute


def _try_attribute(ns: Namespace, tag_name: str, attr_name: str) -> Attribute | None:
    tag = ns.tags.get(tag_name)
    if tag is None:
        return None
    return find_attribute_for_tag(ns, tag, attr_name)


def _deref(ns: Namespace, attribute: Attribute) -> Attribute | None:
    if attribute.ref:
        return ns.attributes.get(attribute.ref)
    return attribute


def resolve_attribute(ns: Namespace, tag_name: str, attr_name: str) -> Attribute | None:
    """Resolve an attribute occurrence, or return None when no tier matches.

    Tiers, in order: the attribute on the tag itself, the attribute on the
    wildcard tag, the wildcard attribute on the tag.
    """
    attribute = (
        _try_attribute(ns, tag_name, attr_name)
        or _try_attribute(ns, WILDCARD, attr_name)
        or _try_attribute(ns, tag_name, WILDCARD)
    )
    if attribute is None:
        return None
    return _deref(ns, attribute)


def for_each_applicable_attribute(
    ns: Namespace,
    tag_name: str,
    visit: Callable[[Attribute, Tag], Any],
) -> None:
    """Visit every attribute declared for *tag_name* and for the wildcard tag.

    ``ref`` attributes are visited as the shared definition they point at.
    A ``ref`` naming no shared attribute is skipped with a warning rather
    than visited as ``None``.
    """
    for name in (tag_name, WILDCARD):
        tag = ns.tags.get(name)
        if tag is None:
            continue

        def handle(attribute: Attribute, tag: Tag = tag) -> None:
            resolved = _deref(ns, attribute)
            if resolved is None:
                logger.warning(f"Attribute ref {attribute.ref!r} on <{tag.name}> is not defined")
                return
            visit(resolved, tag)

        for attribute in tag.attributes.values():
            handle(attribute)
        for group_name in tag.attribute_groups:
            group = ns.attribute_groups.get(group_name)
            if group is not None:
                for attribute in group.values():
                    handle(attribute)
        for attribute in tag.pattern_attributes:
            handle(attribute)

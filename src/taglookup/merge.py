"""Deep merge of tag-library declarations into the unified namespace.

Rules, applied key by key and recursively:

* a list on either side concatenates, old elements first (a lone value
  becomes a one-element list);
* two records of the same kind merge into a fresh record, old folded in
  first and new second, unless the new record sets ``no_merge``, in which
  case it replaces the old one;
* anything else is replaced by the new value.

``None`` on the new side means "not declared" and keeps the old value.
Neither input is mutated.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from taglookup.types import Attribute, Namespace, Tag, TagLibrary


def merge_value(old: Any, new: Any) -> Any:
    """Combine two values found under the same key."""
    if new is None:
        return old
    if old is None:
        return _fresh(new)
    if isinstance(old, list) or isinstance(new, list):
        return _as_list(old) + _as_list(new)
    if isinstance(old, dict) and isinstance(new, dict):
        return merge_mapping(old, new)
    merger = _MERGERS.get(type(old))
    if merger is not None and type(new) is type(old):
        if new.no_merge:
            return new
        return merger(old, new)
    return new


def merge_mapping(old: dict[str, Any], new: dict[str, Any]) -> dict[str, Any]:
    """Merge two name-keyed mappings (tags, attributes, attribute groups)."""
    result: dict[str, Any] = {}
    for key, value in old.items():
        result[key] = merge_value(result.get(key), value)
    for key, value in new.items():
        result[key] = merge_value(result.get(key), value)
    return result


def merge_attribute(old: Attribute, new: Attribute) -> Attribute:
    return Attribute(
        name=merge_value(old.name, new.name),
        ref=merge_value(old.ref, new.ref),
        pattern=merge_value(old.pattern, new.pattern),
        type=merge_value(old.type, new.type),
        description=merge_value(old.description, new.description),
        required=merge_value(old.required, new.required),
        default_value=merge_value(old.default_value, new.default_value),
        deprecated=merge_value(old.deprecated, new.deprecated),
    )


def merge_tag(old: Tag, new: Tag) -> Tag:
    return Tag(
        name=merge_value(old.name, new.name),
        attributes=merge_mapping(old.attributes, new.attributes),
        attribute_groups=_as_list(old.attribute_groups) + _as_list(new.attribute_groups),
        pattern_attributes=_as_list(old.pattern_attributes) + _as_list(new.pattern_attributes),
        nested_tags=merge_mapping(old.nested_tags, new.nested_tags),
        transformers=_as_list(old.transformers) + _as_list(new.transformers),
        migrators=_as_list(old.migrators) + _as_list(new.migrators),
        parent_tag_name=merge_value(old.parent_tag_name, new.parent_tag_name),
        description=merge_value(old.description, new.description),
        renderer=merge_value(old.renderer, new.renderer),
        open_tag_only=merge_value(old.open_tag_only, new.open_tag_only),
        deprecated=merge_value(old.deprecated, new.deprecated),
        taglib_id=merge_value(old.taglib_id, new.taglib_id),
    )


_MERGERS: dict[type, Callable[[Any, Any], Any]] = {
    Tag: merge_tag,
    Attribute: merge_attribute,
}


def merge_library(namespace: Namespace, library: TagLibrary) -> None:
    """Fold *library*'s declarations into *namespace* in place."""
    namespace.tags = merge_mapping(namespace.tags, library.tags)
    namespace.transformers = merge_value(namespace.transformers, library.transformers)
    namespace.text_transformers = merge_value(
        namespace.text_transformers, library.text_transformers
    )
    namespace.attributes = merge_mapping(namespace.attributes, library.attributes)
    namespace.pattern_attributes = merge_value(
        namespace.pattern_attributes, library.pattern_attributes
    )
    namespace.attribute_groups = merge_mapping(
        namespace.attribute_groups, library.attribute_groups or {}
    )


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


def _fresh(value: Any) -> Any:
    # Containers are copied so later merges never write into a library's own data.
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return merge_mapping({}, value)
    return value

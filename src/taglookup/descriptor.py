"""Build tag-library records from plain mappings and TOML descriptor files.

A descriptor mirrors the record fields::

    id = "ui"
    migrator_path = "ui.migrate:template"

    [tags.button]
    description = "A push button"
    attribute_groups = ["common"]
    transformers = [{ path = "ui.transform:button", priority = 10 }]
    migrators = ["ui.migrate:button"]

    [tags.button.attributes.label]
    type = "string"

    [[tags.button.pattern_attributes]]
    name = "on-*"
    pattern = "^on-"

    [tags.button.nested_tags.icon]

Mapping keys supply default names. Migrator strings are resolved to
callables with :func:`pkgutil.resolve_name`.
"""

from __future__ import annotations

import pkgutil
import tomllib
from pathlib import Path
from typing import Any

from taglookup.errors import InvalidTaglibError
from taglookup.types import Attribute, Tag, TagLibrary, Transformer

_ATTRIBUTE_FIELDS = (
    "name",
    "ref",
    "pattern",
    "type",
    "description",
    "required",
    "default_value",
    "deprecated",
    "no_merge",
)

_TAG_SCALARS = ("description", "renderer", "open_tag_only", "deprecated", "no_merge")


def load_library(path: Path) -> TagLibrary:
    """Read a TOML descriptor file into a TagLibrary."""
    with open(path, "rb") as f:
        data = tomllib.load(f)
    return library_from_dict(data, str(path))


def library_from_dict(data: dict[str, Any], path: str | None = None) -> TagLibrary:
    """Build a TagLibrary from a descriptor mapping."""
    taglib_id = data.get("id")
    if not taglib_id:
        raise InvalidTaglibError('"id" expected', path)
    taglib_id = str(taglib_id)

    return TagLibrary(
        id=taglib_id,
        tags={
            name: tag_from_dict(name, value, taglib_id, path)
            for name, value in _table(data, "tags", path).items()
        },
        attributes=_attribute_map(_table(data, "attributes", path), path),
        pattern_attributes=[
            attribute_from_dict(None, a, path) for a in _array(data, "pattern_attributes", path)
        ],
        attribute_groups={
            name: _attribute_map(_expect_table(group, f"attribute_groups.{name}", path), path)
            for name, group in _table(data, "attribute_groups", path).items()
        },
        transformers=[
            transformer_from_dict(t, path) for t in _array(data, "transformers", path)
        ],
        text_transformers=[
            transformer_from_dict(t, path) for t in _array(data, "text_transformers", path)
        ],
        migrator_path=data.get("migrator_path"),
        path=path,
    )


def tag_from_dict(
    name: str,
    data: dict[str, Any],
    taglib_id: str | None = None,
    path: str | None = None,
) -> Tag:
    data = _expect_table(data, f"tags.{name}", path)
    tag = Tag(
        name=str(data.get("name", name)),
        attributes=_attribute_map(_table(data, "attributes", path), path),
        attribute_groups=[str(g) for g in _array(data, "attribute_groups", path)],
        pattern_attributes=[
            attribute_from_dict(None, a, path) for a in _array(data, "pattern_attributes", path)
        ],
        nested_tags={
            nested_name: tag_from_dict(nested_name, nested, taglib_id, path)
            for nested_name, nested in _table(data, "nested_tags", path).items()
        },
        transformers=[
            transformer_from_dict(t, path) for t in _array(data, "transformers", path)
        ],
        migrators=[_resolve_migrator(m, path) for m in _array(data, "migrators", path)],
        taglib_id=taglib_id,
    )
    for key in _TAG_SCALARS:
        if key in data:
            setattr(tag, key, data[key])
    return tag


def attribute_from_dict(name: str | None, data: dict[str, Any], path: str | None = None) -> Attribute:
    data = _expect_table(data, f"attributes.{name}" if name else "pattern_attributes", path)
    kwargs = {key: data[key] for key in _ATTRIBUTE_FIELDS if key in data}
    kwargs.setdefault("name", name)
    return Attribute(**kwargs)


def transformer_from_dict(data: Any, path: str | None = None) -> Transformer:
    if isinstance(data, str):
        return Transformer(path=data)
    data = _expect_table(data, "transformers", path)
    if not data.get("path"):
        raise InvalidTaglibError(f"transformer without path: {data!r}", path)
    return Transformer(path=str(data["path"]), priority=data.get("priority"))


def _attribute_map(table: dict[str, Any], path: str | None) -> dict[str, Attribute]:
    return {name: attribute_from_dict(name, value, path) for name, value in table.items()}


def _resolve_migrator(value: Any, path: str | None) -> Any:
    if callable(value):
        return value
    try:
        return pkgutil.resolve_name(str(value))
    except (ImportError, AttributeError, ValueError) as exc:
        raise InvalidTaglibError(f"cannot resolve migrator {value!r}: {exc}", path) from exc


def _table(data: dict[str, Any], key: str, path: str | None) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    return _expect_table(value, key, path)


def _array(data: dict[str, Any], key: str, path: str | None) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidTaglibError(f'"{key}" must be an array', path)
    return value


def _expect_table(value: Any, key: str, path: str | None) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidTaglibError(f'"{key}" must be a table', path)
    return value

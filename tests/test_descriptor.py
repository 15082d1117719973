"""Tests for building tag libraries from mappings and TOML files."""

from __future__ import annotations

import os.path
import re
import textwrap

import pytest

from taglookup.descriptor import library_from_dict, load_library
from taglookup.errors import InvalidTaglibError

UI_TOML = textwrap.dedent("""\
    id = "ui"
    migrator_path = "ui.migrate:template"

    [[text_transformers]]
    path = "ui.text:trim"
    priority = 2

    [attributes.kind]
    type = "enum"

    [attribute_groups.common.id]
    type = "string"

    [tags.button]
    description = "A push button"
    attribute_groups = ["common"]
    transformers = [{ path = "ui.transform:button", priority = 10 }, "ui.transform:late"]
    migrators = ["os.path:basename"]

    [tags.button.attributes.label]
    type = "string"
    required = true

    [tags.button.attributes.variant]
    ref = "kind"

    [[tags.button.pattern_attributes]]
    name = "on-*"
    pattern = "^on-"

    [tags.button.nested_tags.icon.attributes.src]
    type = "path"
""")


class TestLoadLibrary:
    def test_full_descriptor(self, write_taglib) -> None:
        lib = load_library(write_taglib("ui.toml", UI_TOML))
        assert lib.id == "ui"
        assert lib.migrator_path == "ui.migrate:template"
        assert lib.path is not None and lib.path.endswith("ui.toml")
        assert [t.path for t in lib.text_transformers] == ["ui.text:trim"]
        assert lib.attributes["kind"].name == "kind"
        assert lib.attribute_groups["common"]["id"].type == "string"

    def test_tag_fields(self, write_taglib) -> None:
        button = load_library(write_taglib("ui.toml", UI_TOML)).tags["button"]
        assert button.name == "button"
        assert button.description == "A push button"
        assert button.taglib_id == "ui"
        assert button.attributes["label"].required is True
        assert button.attributes["variant"].ref == "kind"
        assert button.pattern_attributes[0].pattern == re.compile("^on-")
        assert [(t.path, t.priority) for t in button.transformers] == [
            ("ui.transform:button", 10),
            ("ui.transform:late", None),
        ]
        assert button.migrators == [os.path.basename]
        assert button.nested_tags["icon"].attributes["src"].type == "path"

    def test_registered_end_to_end(self, write_taglib, lookup) -> None:
        lookup.register(load_library(write_taglib("ui.toml", UI_TOML)))
        assert lookup.resolve_attribute("button", "variant").type == "enum"
        assert lookup.resolve_attribute("button", "id").type == "string"
        assert lookup.resolve_attribute("button", "on-click").name == "on-*"
        assert lookup.get_tag("button:icon").parent_tag_name == "button"


class TestLibraryFromDict:
    def test_minimal(self) -> None:
        lib = library_from_dict({"id": "empty"})
        assert lib.tags == {}
        assert lib.migrator_path is None

    def test_missing_id(self) -> None:
        with pytest.raises(InvalidTaglibError, match='"id" expected'):
            library_from_dict({"tags": {}}, "bad.toml")

    def test_error_carries_path(self) -> None:
        with pytest.raises(InvalidTaglibError) as exc_info:
            library_from_dict({}, "bad.toml")
        assert exc_info.value.path == "bad.toml"
        assert "bad.toml" in str(exc_info.value)

    def test_explicit_tag_name(self) -> None:
        lib = library_from_dict({"id": "x", "tags": {"btn": {"name": "ui-button"}}})
        assert lib.tags["btn"].name == "ui-button"

    def test_tags_must_be_table(self) -> None:
        with pytest.raises(InvalidTaglibError, match="must be a table"):
            library_from_dict({"id": "x", "tags": ["a"]})

    def test_transformers_must_be_array(self) -> None:
        with pytest.raises(InvalidTaglibError, match="must be an array"):
            library_from_dict({"id": "x", "transformers": {"path": "a"}})

    def test_transformer_without_path(self) -> None:
        with pytest.raises(InvalidTaglibError, match="without path"):
            library_from_dict({"id": "x", "transformers": [{"priority": 1}]})

    def test_unresolvable_migrator(self) -> None:
        data = {"id": "x", "tags": {"a": {"migrators": ["no_such_module_xyz:fn"]}}}
        with pytest.raises(InvalidTaglibError, match="cannot resolve migrator"):
            library_from_dict(data)

    def test_callable_migrator_kept(self) -> None:
        data = {"id": "x", "tags": {"a": {"migrators": [len]}}}
        assert library_from_dict(data).tags["a"].migrators == [len]

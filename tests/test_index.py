"""Tests for tag access, sorted views and early-exit iteration."""

from __future__ import annotations

from dataclasses import dataclass

from conftest import library, names, tag

from taglookup.types import STOP


@dataclass
class Element:
    tag_name: str


class TestGetTag:
    def test_empty_lookup(self, lookup) -> None:
        assert lookup.get_tag("x") is None

    def test_by_name(self, lookup) -> None:
        lookup.register(library("lib", tag("x")))
        assert lookup.get_tag("x").name == "x"

    def test_by_handle(self, lookup) -> None:
        lookup.register(library("lib", tag("x")))
        assert lookup.get_tag(Element("x")).name == "x"

    def test_unknown(self, lookup) -> None:
        lookup.register(library("lib", tag("x")))
        assert lookup.get_tag("y") is None


class TestSortedTags:
    def test_ascending(self, lookup) -> None:
        lookup.register(library("lib", tag("zeta"), tag("alpha"), tag("mid")))
        assert names(lookup.get_sorted_tags()) == ["alpha", "mid", "zeta"]

    def test_cached_until_register(self, lookup) -> None:
        lookup.register(library("lib", tag("b"), tag("a")))
        first = lookup.get_sorted_tags()
        assert lookup.get_sorted_tags() is first

        lookup.register(library("more", tag("c")))
        second = lookup.get_sorted_tags()
        assert second is not first
        assert names(second) == ["a", "b", "c"]

    def test_duplicate_register_keeps_cache(self, lookup) -> None:
        lib = library("lib", tag("a"))
        lookup.register(lib)
        first = lookup.get_sorted_tags()
        lookup.register(lib)
        assert lookup.get_sorted_tags() is first

    def test_includes_nested(self, lookup) -> None:
        lookup.register(library("lib", tag("b", nested_tags={"x": tag("x")}), tag("a")))
        assert names(lookup.get_sorted_tags()) == ["a", "b", "b:x"]


class TestForEachTag:
    def test_insertion_order(self, lookup) -> None:
        lookup.register(library("lib", tag("z"), tag("a")))
        seen: list[str] = []
        lookup.for_each_tag(lambda t: seen.append(t.name))
        assert seen == ["z", "a"]

    def test_stop_on_second(self, lookup) -> None:
        lookup.register(library("lib", *(tag(f"t{i}") for i in range(10))))
        seen: list[str] = []

        def visit(t):
            seen.append(t.name)
            if len(seen) == 2:
                return STOP
            return None

        lookup.for_each_tag(visit)
        assert seen == ["t0", "t1"]

    def test_falsy_return_does_not_stop(self, lookup) -> None:
        lookup.register(library("lib", tag("a"), tag("b")))
        seen: list[str] = []

        def visit(t):
            seen.append(t.name)
            return False

        lookup.for_each_tag(visit)
        assert seen == ["a", "b"]

    def test_len(self, lookup) -> None:
        lookup.register(library("lib", tag("a"), tag("b")))
        assert len(lookup) == 2

"""Tests des stratégies de nommage"""

from jmx_agent.model.naming import (
    DEFAULT_SEPARATOR,
    NamingKind,
    NamingStrategy,
    parse_type_name_values,
)

EDEN = {"type": "MemoryPool", "name": "PS Eden Space"}


class TestSelection:

    def test_use_all_has_priority(self):
        strategy = NamingStrategy.select(True, ["name"], False)
        assert strategy.kind is NamingKind.USE_ALL

    def test_prepending_when_type_names(self):
        strategy = NamingStrategy.select(False, ["name"], True)
        assert strategy.kind is NamingKind.PREPENDING
        assert strategy.prepended_names == ("name",)
        assert strategy.separator == "."

    def test_default_otherwise(self):
        strategy = NamingStrategy.select(False, [], False)
        assert strategy.kind is NamingKind.DEFAULT
        assert strategy.separator == DEFAULT_SEPARATOR == "_"


class TestUseAll:

    def test_all_properties_in_map_order(self):
        strategy = NamingStrategy.select(True, [], False)
        assert strategy.build(EDEN) == "type_MemoryPool_name_PS Eden Space"

    def test_deterministic(self):
        strategy = NamingStrategy.select(True, [], True)
        assert strategy.build(EDEN) == strategy.build(dict(EDEN))

    def test_ignores_type_names(self):
        strategy = NamingStrategy.select(True, ["name"], True)
        assert strategy.build(EDEN) == "type.MemoryPool.name.PS Eden Space"

    def test_empty_map(self):
        assert NamingStrategy.select(True, [], False).build({}) == ""


class TestPrepending:

    def test_value_comes_first(self):
        strategy = NamingStrategy.select(False, ["name"], True)
        assert strategy.build({"name": "PS Eden Space", "type": "MemoryPool"}, "default") \
            == "PS Eden Space.default"

    def test_order_follows_configuration(self):
        strategy = NamingStrategy.select(False, ["type", "name"], False)
        assert strategy.build(EDEN) == "MemoryPool_PS Eden Space"

    def test_missing_properties_are_skipped(self):
        strategy = NamingStrategy.select(False, ["missing", "name"], False)
        assert strategy.build(EDEN) == "PS Eden Space"

    def test_no_match_falls_back_to_default_fragment(self):
        strategy = NamingStrategy.select(False, ["missing"], False)
        assert strategy.build(EDEN) == ""
        assert strategy.build(EDEN, "fragment") == "fragment"


class TestDefault:

    def test_identity(self):
        strategy = NamingStrategy.select(False, [], False)
        assert strategy.build(EDEN, "name=PS Eden Space") == "name=PS Eden Space"
        assert strategy.build(EDEN) == ""


def test_parse_type_name_values():
    assert parse_type_name_values("name=PS Eden Space,type=MemoryPool") == {
        "name": "PS Eden Space", "type": "MemoryPool"}
    assert parse_type_name_values("") == {}
    assert parse_type_name_values(None) == {}

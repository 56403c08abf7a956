"""Tests de QuerySpec et de son builder"""

import pytest

from jmx_agent.core.errors import ConfigurationError, InvalidPattern
from jmx_agent.model.naming import NamingKind
from jmx_agent.model.pattern import ResourcePattern
from jmx_agent.model.query import QuerySpec
from jmx_agent.writers import LogWriterFactory

from .conftest import RecordingWriterFactory


class FailingFactory(RecordingWriterFactory):

    def create(self):
        raise RuntimeError("writer unavailable")


class TestConstruction:

    def test_defaults(self):
        query = QuerySpec.build("java.lang:type=Memory")
        assert query.pattern == ResourcePattern("java.lang:type=Memory")
        assert query.attr == ()
        assert query.keys == ()
        assert query.type_names == ()
        assert query.result_alias is None
        assert query.output_writers == ()
        assert query.output_writer_instances == ()
        assert not query.allow_dotted_keys
        assert query.naming_strategy.kind is NamingKind.DEFAULT

    def test_invalid_pattern(self):
        with pytest.raises(InvalidPattern) as excinfo:
            QuerySpec.build("not a pattern")
        assert excinfo.value.pattern == "not a pattern"

    def test_inputs_are_copied(self):
        attr = ["HeapMemoryUsage"]
        type_names = ["name"]
        query = QuerySpec.build("java.lang:type=Memory", attr=attr, type_names=type_names)
        attr.append("NonHeapMemoryUsage")
        type_names.append("type")
        assert query.attr == ("HeapMemoryUsage",)
        assert query.type_names == ("name",)

    def test_is_immutable(self):
        query = QuerySpec.build("java.lang:type=Memory")
        with pytest.raises(AttributeError):
            query._result_alias = "x"

    def test_writers_created_once_in_order(self):
        calls = []
        first = RecordingWriterFactory(calls, "first")
        second = RecordingWriterFactory(calls, "second")
        query = QuerySpec.build("java.lang:type=Memory", output_writers=[first, second])
        assert first.created == 1
        assert second.created == 1
        assert [w.name for w in query.output_writer_instances] == ["first", "second"]

    def test_factory_failure_aborts_construction(self):
        with pytest.raises(RuntimeError):
            QuerySpec.build("java.lang:type=Memory",
                            output_writers=[RecordingWriterFactory(), FailingFactory()])

    def test_strategy_selection(self):
        assert QuerySpec.build("d:type=A", type_names=["name"]).naming_strategy.kind \
            is NamingKind.PREPENDING
        assert QuerySpec.build("d:type=A", type_names=["name"], use_all_type_names=True) \
            .naming_strategy.kind is NamingKind.USE_ALL

    def test_type_names_are_deduplicated(self):
        query = QuerySpec.build("d:type=A", type_names=["name", "type", "name"])
        assert query.type_names == ("name", "type")

    def test_placeholders_resolved_in_attr_and_keys(self, monkeypatch):
        monkeypatch.setenv("JMX_ATTR", "HeapMemoryUsage")
        query = QuerySpec.build("java.lang:type=Memory",
                                attr=["${JMX_ATTR}"], keys=["${JMX_KEY:used}"])
        assert query.attr == ("HeapMemoryUsage",)
        assert query.keys == ("used",)


class TestEquality:

    def test_flags_are_ignored(self):
        a = QuerySpec.build("java.lang:type=Memory", attr=["HeapMemoryUsage"])
        b = QuerySpec.build("java.lang:type=Memory", attr=["HeapMemoryUsage"],
                            allow_dotted_keys=True, use_all_type_names=True,
                            use_obj_domain_as_key=True)
        assert a == b
        assert hash(a) == hash(b)

    def test_reflexive_symmetric_transitive(self):
        a = QuerySpec.build("d:type=A", allow_dotted_keys=True)
        b = QuerySpec.build("d:type=A")
        c = QuerySpec.build("d:type=A", use_all_type_names=True)
        assert a == a
        assert a == b and b == a
        assert b == c and a == c

    @pytest.mark.parametrize("kwargs", [
        {"obj": "d:type=B"},
        {"attr": ["Other"]},
        {"type_names": ["name"]},
        {"result_alias": "alias"},
        {"output_writers": [RecordingWriterFactory()]},
    ])
    def test_identity_fields(self, kwargs):
        base = {"obj": "d:type=A", "attr": ["Value"]}
        assert QuerySpec.build(**base) != QuerySpec.build(**{**base, **kwargs})

    def test_writer_contents_are_ignored(self):
        a = QuerySpec.build("d:type=A", output_writers=[LogWriterFactory()])
        b = QuerySpec.build("d:type=A", output_writers=[RecordingWriterFactory()])
        assert a == b

    def test_other_types(self):
        query = QuerySpec.build("d:type=A")
        assert query != None  # noqa: E711
        assert query != "d:type=A"


class TestBuilder:

    def test_accumulates_values(self):
        factory = RecordingWriterFactory()
        query = (QuerySpec.builder()
                 .set_obj("java.lang:type=MemoryPool,name=*")
                 .add_attr("Usage")
                 .add_attr("Valid", "Usage")
                 .add_key("used")
                 .add_keys("max", "used")
                 .set_type_names(["name"])
                 .set_result_alias("pools")
                 .set_allow_dotted_keys(True)
                 .add_output_writer(factory)
                 .build())
        assert query.attr == ("Usage", "Valid", "Usage")
        assert query.keys == ("used", "max", "used")
        assert query.type_names == ("name",)
        assert query.result_alias == "pools"
        assert query.allow_dotted_keys
        assert factory.created == 1

    def test_missing_obj(self):
        with pytest.raises(InvalidPattern):
            QuerySpec.builder().add_attr("Usage").build()

    def test_builds_independent_specs(self):
        builder = QuerySpec.builder().set_obj("d:type=A").add_attr("One")
        first = builder.build()
        builder.add_attr("Two")
        assert first.attr == ("One",)
        assert builder.build().attr == ("One", "Two")


class TestStructuredConfiguration:

    def test_from_dict(self):
        query = QuerySpec.from_dict({
            "obj": "java.lang:type=MemoryPool,name=*",
            "attr": ["Usage"],
            "typeNames": ["name"],
            "resultAlias": "pools",
            "keys": ["used"],
            "allowDottedKeys": True,
            "useAllTypeNames": False,
            "outputWriters": [{"type": "log"}],
            "useObjDomainAsKey": True,
            "unknownField": 42,
        })
        assert query.attr == ("Usage",)
        assert query.type_names == ("name",)
        assert query.result_alias == "pools"
        assert query.keys == ("used",)
        assert query.allow_dotted_keys
        assert query.use_obj_domain_as_key
        assert isinstance(query.output_writers[0], LogWriterFactory)
        assert len(query.output_writer_instances) == 1

    def test_from_dict_requires_obj(self):
        with pytest.raises(ConfigurationError):
            QuerySpec.from_dict({"attr": ["Usage"]})

    def test_unknown_writer_type(self):
        with pytest.raises(ConfigurationError):
            QuerySpec.from_dict({"obj": "d:type=A", "outputWriters": [{"type": "carrier-pigeon"}]})

    def test_to_dict_canonical_order_without_nulls(self):
        query = QuerySpec.build("java.lang:type=Memory", attr=["HeapMemoryUsage"],
                                output_writers=[LogWriterFactory()])
        data = query.to_dict()
        assert list(data) == ["obj", "attr", "typeNames", "keys", "allowDottedKeys",
                              "useAllTypeNames", "outputWriters", "useObjDomainAsKey"]
        assert data["obj"] == "java.lang:type=Memory"
        assert QuerySpec.from_dict(data) == query

    def test_repr_hides_writers(self):
        text = repr(QuerySpec.build("d:type=A", output_writers=[RecordingWriterFactory()]))
        assert "d:type=A" in text
        assert "Recording" not in text

    @pytest.mark.parametrize("field", ["attr", "typeNames", "keys"])
    def test_scalar_list_field_is_rejected(self, field):
        with pytest.raises(ConfigurationError) as excinfo:
            QuerySpec.from_dict({"obj": "d:type=A", field: "HeapMemoryUsage"})
        assert field in str(excinfo.value)

    def test_list_items_must_be_strings(self):
        with pytest.raises(ConfigurationError):
            QuerySpec.from_dict({"obj": "d:type=A", "attr": ["Usage", 3]})

    @pytest.mark.parametrize("field", ["allowDottedKeys", "useAllTypeNames", "useObjDomainAsKey"])
    def test_flags_must_be_booleans(self, field):
        with pytest.raises(ConfigurationError) as excinfo:
            QuerySpec.from_dict({"obj": "d:type=A", field: "false"})
        assert field in str(excinfo.value)

    def test_null_fields_use_defaults(self):
        query = QuerySpec.from_dict({"obj": "d:type=A", "attr": None, "allowDottedKeys": None})
        assert query.attr == ()
        assert not query.allow_dotted_keys

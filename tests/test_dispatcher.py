"""Tests de l'envoi des résultats aux writers"""

import pytest

from jmx_agent.core.dispatcher import ResultDispatcher
from jmx_agent.core.errors import WriterError
from jmx_agent.core.executor import QueryExecutor
from jmx_agent.model.query import QuerySpec

from .conftest import RecordingWriterFactory


def test_writers_called_in_order(server, connection):
    calls = []
    query = QuerySpec.build("java.lang:type=Memory", attr=["HeapMemoryUsage"],
                            output_writers=[RecordingWriterFactory(calls, "a"),
                                            RecordingWriterFactory(calls, "b")])
    results = QueryExecutor().execute(query, connection).results

    ResultDispatcher().dispatch(server, query, results)

    assert [c[0] for c in calls] == ["a", "b"]
    for _, called_server, called_query, called_results in calls:
        assert called_server is server
        assert called_query is query
        assert called_results == results


def test_empty_discovery_still_dispatches(server, connection):
    calls = []
    query = QuerySpec.build("com.acme:type=Nothing",
                            output_writers=[RecordingWriterFactory(calls, "a"),
                                            RecordingWriterFactory(calls, "b")])
    outcome = QueryExecutor().execute(query, connection)
    assert outcome.results == []

    ResultDispatcher().dispatch(server, query, outcome.results)

    assert [(c[0], c[3]) for c in calls] == [("a", []), ("b", [])]


def test_first_failure_stops_dispatch(server):
    calls = []
    query = QuerySpec.build("d:type=A", output_writers=[
        RecordingWriterFactory(calls, "a"),
        RecordingWriterFactory(calls, "b", failure=WriterError("down")),
        RecordingWriterFactory(calls, "c"),
    ])
    with pytest.raises(WriterError):
        ResultDispatcher().dispatch(server, query, [])
    assert [c[0] for c in calls] == ["a", "b"]


def test_writer_instances_are_reused(server):
    factory = RecordingWriterFactory()
    query = QuerySpec.build("d:type=A", output_writers=[factory])
    dispatcher = ResultDispatcher()
    dispatcher.dispatch(server, query, [])
    dispatcher.dispatch(server, query, [])
    assert factory.created == 1
    assert len(factory.calls) == 2

"""
Configuration pytest et fixtures communes
"""

import pytest

from jmx_agent.connections.memory import InMemoryConnection
from jmx_agent.model.server import ServerContext
from jmx_agent.writers.base import OutputWriter, OutputWriterFactory


class RecordingWriter(OutputWriter):
    """Writer qui garde chaque appel"""

    def __init__(self, calls, name, failure=None):
        self.calls = calls
        self.name = name
        self.failure = failure
        self.closed = False

    def do_write(self, server, query, results):
        self.calls.append((self.name, server, query, list(results)))
        if self.failure is not None:
            raise self.failure

    def close(self):
        self.closed = True


class RecordingWriterFactory(OutputWriterFactory):
    """Fabrique qui compte ses appels à create()"""

    def __init__(self, calls=None, name="recording", failure=None):
        self.calls = calls if calls is not None else []
        self.name = name
        self.failure = failure
        self.created = 0

    def create(self):
        self.created += 1
        return RecordingWriter(self.calls, self.name, self.failure)


@pytest.fixture
def server():
    return ServerContext(url="http://app1:8778/jolokia", alias="app1")


@pytest.fixture
def connection():
    """Registre avec la mémoire et deux pools mémoire"""
    conn = InMemoryConnection()
    conn.register("java.lang:type=Memory", "sun.management.MemoryImpl", {
        "HeapMemoryUsage": {"committed": 512, "init": 256, "max": 1024, "used": 128},
        "ObjectPendingFinalizationCount": 0,
    })
    conn.register("java.lang:type=MemoryPool,name=PS Eden Space",
                  "sun.management.MemoryPoolImpl", {"Usage": {"used": 10}, "Valid": True})
    conn.register("java.lang:type=MemoryPool,name=PS Old Gen",
                  "sun.management.MemoryPoolImpl", {"Usage": {"used": 20}, "Valid": True})
    return conn

"""Tests de la résolution des variables"""

from jmx_agent.core.properties import resolve_list, resolve_props

ENV = {"HOST": "app1", "PORT": "8778"}


def test_resolves_known_variables():
    assert resolve_props("${HOST}:${PORT}", ENV) == "app1:8778"


def test_default_value():
    assert resolve_props("${MISSING:fallback}", ENV) == "fallback"
    assert resolve_props("${MISSING:}", ENV) == ""


def test_unknown_variable_is_kept():
    assert resolve_props("${MISSING}", ENV) == "${MISSING}"


def test_plain_values():
    assert resolve_props("HeapMemoryUsage", ENV) == "HeapMemoryUsage"
    assert resolve_props("", ENV) == ""
    assert resolve_props(None, ENV) is None


def test_resolve_list():
    assert resolve_list(["${HOST}", "static"], ENV) == ["app1", "static"]

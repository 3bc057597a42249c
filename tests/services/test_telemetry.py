"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from graphlog.infrastructure.workspace import Workspace
from graphlog.services.query import QueryService
from graphlog.services.result import ServiceResult
from graphlog.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)
from tests.conftest import seed


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ── Span unit tests ──────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "children" not in d
        assert "annotations" not in d

    def test_to_dict_with_children_and_annotations(self) -> None:
        root = Span(name="root")
        child = Span(name="search", parent=root)
        root.children.append(child)
        child.annotate("expansions", 42)
        child.end()
        root.end()
        d = root.to_dict()
        assert d["children"][0]["name"] == "search"
        assert d["children"][0]["annotations"] == {"expansions": 42}


# ── trace_span tests ─────────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("test") as span:
            assert span is None

    def test_no_root_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("test") as span:
            assert span is None

    def test_nested_spans(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with trace_span("a"), trace_span("b") as inner:
                assert get_current_span() is inner
            assert root.children[0].name == "a"
            assert root.children[0].children[0].name == "b"
            assert root.children[0].end_time is not None
        finally:
            _current_span.reset(token)


# ── @traced tests ────────────────────────────────────────────────────


@traced
def _sample_op() -> ServiceResult:
    with trace_span("inner"):
        pass
    return ServiceResult(ok=True, op="sample", meta={"expansions": 1})


class TestTraced:
    def test_disabled_passes_through(self) -> None:
        result = _sample_op()
        assert result.meta == {"expansions": 1}

    def test_enabled_injects_span_tree(self) -> None:
        enable_telemetry()
        result = _sample_op()
        assert result.meta is not None
        assert result.meta["expansions"] == 1
        tree = result.meta["telemetry"]
        assert tree["name"] == "_sample_op"
        assert tree["children"][0]["name"] == "inner"

    def test_restores_current_span(self) -> None:
        enable_telemetry()
        _sample_op()
        assert get_current_span() is None


class TestServiceTelemetry:
    def test_query_records_replay_and_search(self, workspace: Workspace) -> None:
        seed(workspace, (1, 2), (2, 1))
        enable_telemetry()
        result = QueryService(workspace).cycles("count")
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"] == "QueryService.cycles"
        names = [child["name"] for child in tree["children"]]
        assert names == ["replay", "search"]
        assert tree["children"][1]["annotations"]["mode"] == "count"

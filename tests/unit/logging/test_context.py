"""Tests for request-scoped logging context."""

import asyncio

import pytest
import structlog

from intake.logging import (
    bind_request_context,
    clear_request_context,
    get_module_logger,
    get_request_id,
)

pytestmark = pytest.mark.unit


class TestBindRequestContext:
    def test_binds_and_unbinds(self):
        with bind_request_context(request_id="req-1", caller_key="10.0.0.1") as rid:
            context = structlog.contextvars.get_contextvars()
            assert rid == "req-1"
            assert context["request_id"] == "req-1"
            assert context["caller_key"] == "10.0.0.1"

        assert structlog.contextvars.get_contextvars() == {}

    def test_generates_request_id(self):
        with bind_request_context() as rid:
            assert rid
            assert get_request_id() == rid

        assert get_request_id() is None

    def test_optional_fields_omitted(self):
        with bind_request_context(request_id="req-1"):
            context = structlog.contextvars.get_contextvars()

        assert "caller_key" not in context
        assert "batch_id" not in context

    def test_extra_context(self):
        with bind_request_context(batch_id="b-1", client_id="c-1"):
            context = structlog.contextvars.get_contextvars()

        assert context["batch_id"] == "b-1"
        assert context["client_id"] == "c-1"

    def test_unbinds_on_exception(self):
        with pytest.raises(RuntimeError):
            with bind_request_context(request_id="req-1"):
                raise RuntimeError("boom")

        assert get_request_id() is None

    @pytest.mark.asyncio
    async def test_context_isolated_between_tasks(self):
        async def handle(request_id):
            with bind_request_context(request_id=request_id):
                await asyncio.sleep(0)
                return get_request_id()

        results = await asyncio.gather(handle("a"), handle("b"))

        assert results == ["a", "b"]

    def test_clear_request_context(self):
        structlog.contextvars.bind_contextvars(request_id="stale")

        clear_request_context()

        assert get_request_id() is None


class TestGetModuleLogger:
    def test_binds_component(self):
        logger = get_module_logger()

        context = structlog.get_context(logger)
        assert context["component"] == "test_context"
        assert context["module_path"] == __name__

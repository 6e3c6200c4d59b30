"""
Tests for request-scoped context and execution tracing.
"""

import asyncio
import logging

import pytest

from src.observability import trace_span
from src.utils.request_context import (
    clear_request_context,
    get_session_employee,
    get_thread_id,
    get_tools_called,
    get_wizard_action,
    register_tool_call,
    request_wizard_action,
    set_request_context,
)


class TestRequestContext:
    def test_set_and_clear(self):
        set_request_context("t1", "E001")
        register_tool_call("get_wizard_context")
        request_wizard_action("init")

        assert get_thread_id() == "t1"
        assert get_session_employee() == "E001"
        assert get_tools_called() == ["get_wizard_context"]
        assert get_wizard_action() == "init"

        clear_request_context()

        assert get_thread_id() is None
        assert get_tools_called() == []
        assert get_wizard_action() is None

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            request_wizard_action("respond")

    def test_concurrent_requests_are_isolated(self):
        async def handle(thread_id, action):
            set_request_context(thread_id, None)
            await asyncio.sleep(0)
            request_wizard_action(action)
            await asyncio.sleep(0)
            return get_thread_id(), get_wizard_action()

        async def main():
            return await asyncio.gather(handle("a", "init"), handle("b", "resume"))

        assert asyncio.run(main()) == [("a", "init"), ("b", "resume")]

    def test_tool_in_copied_context_reaches_request(self):
        async def main():
            set_request_context("t1", None)
            await asyncio.to_thread(request_wizard_action, "resume")
            return get_wizard_action()

        assert asyncio.run(main()) == "resume"


class TestTraceSpan:
    def test_logs_success(self, caplog):
        with caplog.at_level(logging.INFO, logger="leave_intake.trace"):
            with trace_span("unit.ok", thread="t1"):
                pass

        assert "[TRACE] unit.ok" in caplog.text
        assert "status=ok thread=t1" in caplog.text

    def test_logs_and_reraises_errors(self, caplog):
        with caplog.at_level(logging.INFO, logger="leave_intake.trace"):
            with pytest.raises(KeyError):
                with trace_span("unit.fail"):
                    raise KeyError("x")

        assert "status=error:KeyError" in caplog.text

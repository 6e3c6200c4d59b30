"""
Tests for agent tools (get_wizard_context, start_wizard, resume_wizard).
"""

import asyncio
from unittest.mock import patch

import pytest

from src.schemas import InputResponse
from src.tools import AGENT_TOOLS, get_wizard_context, resume_wizard, start_wizard
from src.utils.request_context import (
    clear_request_context,
    get_tools_called,
    get_wizard_action,
    set_request_context,
)


@pytest.fixture
def bound_thread(controller):
    """Bind a request context to thread t1 and route tools to the test controller."""
    set_request_context("t1", "E001")
    with patch("src.tools.get_flow_controller", return_value=controller):
        yield controller
    clear_request_context()


class TestGetWizardContext:
    """Test the get_wizard_context tool."""

    def test_no_session(self, bound_thread):
        result = get_wizard_context()

        assert result["status"] == "not_started"
        assert result["steps"] == []
        assert get_tools_called() == ["get_wizard_context"]

    def test_reports_answers(self, bound_thread):
        bound_thread.init("t1")
        bound_thread.oracle.verdicts = {"step-2": True}
        asyncio.run(
            bound_thread.respond(
                "t1", "step-1", [InputResponse(question_id="q-type", value="medical")]
            )
        )

        result = get_wizard_context()

        assert result["status"] == "in-progress"
        assert result["current_step_id"] == "step-2"
        first = result["steps"][0]
        assert first["status"] == "completed"
        assert first["questions"][0]["response_label"] == "Medical"

    def test_without_request_context(self):
        clear_request_context()

        assert get_wizard_context() == {"status": "not_started", "steps": []}


class TestStartWizard:
    """Test the start_wizard hand-off tool."""

    def test_records_init(self, bound_thread):
        result = start_wizard()

        assert result["success"] is True
        assert get_wizard_action() == "init"

    def test_does_not_touch_the_store(self, bound_thread):
        start_wizard()

        assert bound_thread.get_checkpoint("t1") is None


class TestResumeWizard:
    """Test the resume_wizard hand-off tool."""

    def test_refuses_without_session(self, bound_thread):
        result = resume_wizard()

        assert result["success"] is False
        assert "start_wizard" in result["error"]
        assert get_wizard_action() is None

    def test_records_resume(self, bound_thread):
        bound_thread.init("t1")

        result = resume_wizard()

        assert result["success"] is True
        assert get_wizard_action() == "resume"

    def test_refuses_abandoned_session(self, bound_thread):
        bound_thread.init("t1")
        bound_thread.abandon("t1")

        assert resume_wizard()["success"] is False

    def test_resumes_own_session(self, bound_thread):
        bound_thread.init("t1", employee_id="E001")

        assert resume_wizard()["success"] is True

    def test_refuses_other_employees_session(self, bound_thread):
        bound_thread.init("t1", employee_id="E999")

        result = resume_wizard()

        assert result["success"] is False
        assert "another employee" in result["error"]
        assert get_wizard_action() is None


def test_tool_registry():
    assert [t.__name__ for t in AGENT_TOOLS] == ["get_wizard_context", "start_wizard", "resume_wizard"]

"""
Pytest configuration and fixtures.
Shared test utilities, sample configs and a scripted rule oracle.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from src.flow import WizardFlowController
from src.schemas import Response, SessionStatus, WizardConfig, WizardSession
from src.session_store import InMemorySessionStore
from src.wizard_config import load_wizard_config
from tests.fakes import ScriptedRuleOracle, make_question


SIMPLE_CONFIG = {
    "wizardId": "simple-v1",
    "wizardName": "Simple",
    "steps": [
        {"stepId": "step-1", "sort": 1, "name": "one", "title": "One", "semanticTag": "S:1"},
        {
            "stepId": "step-2",
            "sort": 2,
            "name": "two",
            "title": "Two",
            "semanticTag": "S:2",
            "rule": 'LEAVE_TYPE equals "medical"',
        },
        {"stepId": "step-3", "sort": 3, "name": "three", "title": "Three", "semanticTag": "S:3"},
    ],
    "elements": [
        make_question(
            "el-type", "step-1", "q-type", "LEAVE_TYPE", options=["medical", "family-care"]
        ),
        {
            "elementId": "el-info",
            "stepId": "step-2",
            "type": "info",
            "sort": 1,
            "attributes": {
                "componentTypeKey": "infoCard",
                "infoId": "info-2",
                "title": "Medical",
                "content": "Bring a certificate.",
            },
        },
        make_question("el-notes-b", "step-3", "q-notes-b", "NOTES_B", sort=2),
        make_question("el-notes-a", "step-3", "q-notes-a", "NOTES_A", sort=1),
    ],
}


TWO_RULES_CONFIG = {
    "wizardId": "two-rules-v1",
    "wizardName": "Two Rules",
    "steps": [
        {"stepId": "step-1", "sort": 1, "name": "one", "title": "One", "semanticTag": "T:1"},
        {
            "stepId": "step-2",
            "sort": 2,
            "name": "two",
            "title": "Two",
            "semanticTag": "T:2",
            "rule": 'LEAVE_TYPE equals "medical"',
        },
        {
            "stepId": "step-3",
            "sort": 3,
            "name": "three",
            "title": "Three",
            "semanticTag": "T:3",
            "rule": 'LEAVE_TYPE equals "family-care"',
        },
    ],
    "elements": [make_question("el-type", "step-1", "q-type", "LEAVE_TYPE")],
}


@pytest.fixture
def simple_config():
    return WizardConfig.model_validate(SIMPLE_CONFIG)


@pytest.fixture
def two_rules_config():
    return WizardConfig.model_validate(TWO_RULES_CONFIG)


@pytest.fixture
def intake_config():
    return load_wizard_config("leave-intake-v1")


@pytest.fixture
def make_session():
    """Build a session at ``step_id`` with (tag, value) answers."""

    def _make(step_id="step-1", answers=(), wizard_id="simple-v1", status=SessionStatus.IN_PROGRESS):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        return WizardSession(
            session_id="sess-test",
            wizard_id=wizard_id,
            employee_id="E001",
            created_at=now,
            updated_at=now,
            current_step_id=step_id,
            status=status,
            responses=[
                Response(question_id=f"q-{tag.lower()}", semantic_tag=tag, value=value, answered_at=now)
                for tag, value in answers
            ],
        )

    return _make


@pytest.fixture
def store():
    return InMemorySessionStore(max_sessions=100, ttl_seconds=3600)


@pytest.fixture
def oracle():
    return ScriptedRuleOracle()


@pytest.fixture
def configs(simple_config, two_rules_config, intake_config):
    return {c.wizard_id: c for c in (simple_config, two_rules_config, intake_config)}


@pytest.fixture
def controller(oracle, store, configs):
    """Flow controller over the sample configs, defaulting to the simple one."""
    return WizardFlowController(
        oracle=oracle,
        store=store,
        config_loader=configs.__getitem__,
        default_wizard_id="simple-v1",
    )


@pytest.fixture
def test_client():
    """Create FastAPI test client."""
    from src.main import app

    return TestClient(app)

"""
Tests for FastAPI endpoints.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from src.agent import ChatReply
from src.main import app


class TestMonitoringEndpoints:
    @pytest.fixture
    def client(self):
        return TestClient(app)

    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "Leave Intake Assistant API" in data["message"]
        assert "version" in data

    def test_health_endpoint(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "environment" in data
        assert data["rule_oracle_circuit_breaker"]["state"] == "closed"

    def test_ready_endpoint(self, client):
        assert client.get("/ready").json() == {"status": "ready"}

    def test_metrics_endpoint(self, client):
        response = client.get("/metrics")
        assert response.status_code == 200
        data = response.json()
        assert "circuit_breaker" in data
        assert "wizard_sessions" in data
        assert "environment" in data


class TestWizardEndpoints:
    @pytest.fixture
    def client(self, controller):
        with patch("src.main.get_flow_controller", return_value=controller):
            yield TestClient(app)

    def test_init_returns_first_step(self, client):
        response = client.post("/wizard/t1", json={"action": "init", "employeeId": "E001"})

        assert response.status_code == 200
        data = response.json()
        assert data["step"]["stepId"] == "step-1"
        assert data["elements"][0]["attributes"]["questionId"] == "q-type"
        assert data["session"]["status"] == "in-progress"
        assert data["session"]["employeeId"] == "E001"

    def test_respond_and_complete(self, client, oracle):
        oracle.verdicts = {"step-2": False}
        client.post("/wizard/t1", json={"action": "init"})

        response = client.post(
            "/wizard/t1",
            json={
                "action": "respond",
                "stepId": "step-1",
                "inputResponses": [{"questionId": "q-type", "value": "family-care"}],
            },
        )
        assert response.json()["step"]["stepId"] == "step-3"

        response = client.post("/wizard/t1", json={"action": "respond", "stepId": "step-3"})
        data = response.json()
        assert data["step"]["stepId"] == "complete"
        assert data["elements"] == []
        assert data["session"]["status"] == "completed"

    def test_resume(self, client):
        client.post("/wizard/t1", json={"action": "init"})

        first = client.post("/wizard/t1", json={"action": "resume"}).json()
        second = client.post("/wizard/t1", json={"action": "resume"}).json()

        assert first == second

    def test_step_mismatch_is_conflict(self, client):
        client.post("/wizard/t1", json={"action": "init"})

        response = client.post(
            "/wizard/t1",
            json={
                "action": "respond",
                "stepId": "step-5",
                "inputResponses": [{"questionId": "q-type", "value": "medical"}],
            },
        )

        assert response.status_code == 409
        assert response.json() == {
            "error": "step_mismatch",
            "detail": 'Step mismatch: received "step-5" but current step is "step-1"',
            "retryable": False,
        }

    def test_unknown_question_is_unprocessable(self, client):
        client.post("/wizard/t1", json={"action": "init"})

        response = client.post(
            "/wizard/t1",
            json={
                "action": "respond",
                "stepId": "step-1",
                "inputResponses": [{"questionId": "q-ghost", "value": "x"}],
            },
        )

        assert response.status_code == 422
        assert response.json()["error"] == "unknown_question"

    def test_oracle_outage_is_retryable(self, client, oracle):
        from src.errors import OracleUnavailableError

        client.post("/wizard/t1", json={"action": "init"})
        oracle.error = OracleUnavailableError("provider down")

        response = client.post(
            "/wizard/t1",
            json={
                "action": "respond",
                "stepId": "step-1",
                "inputResponses": [{"questionId": "q-type", "value": "medical"}],
            },
        )

        assert response.status_code == 503
        assert response.json()["retryable"] is True

    def test_missing_session_is_not_found(self, client):
        response = client.post("/wizard/nobody", json={"action": "resume"})

        assert response.status_code == 404
        assert response.json()["error"] == "session_not_found"

    def test_invalid_action_is_rejected(self, client):
        response = client.post("/wizard/t1", json={"action": "skip"})
        assert response.status_code == 422

    def test_context_endpoint(self, client):
        assert client.get("/wizard/t1/context").json()["status"] == "not_started"

        client.post("/wizard/t1", json={"action": "init"})
        data = client.get("/wizard/t1/context").json()

        assert data["status"] == "in-progress"
        assert data["steps"][0]["status"] == "current"
        assert data["steps"][1]["status"] == "conditional"

    def test_abandon_endpoint(self, client):
        client.post("/wizard/t1", json={"action": "init"})

        response = client.post("/wizard/t1/abandon")

        assert response.status_code == 200
        assert response.json()["status"] == "abandoned"
        assert client.post("/wizard/t1/abandon").status_code == 409


class TestChatEndpoint:
    @pytest.fixture
    def client(self, controller):
        with patch("src.main.get_flow_controller", return_value=controller):
            yield TestClient(app)

    @staticmethod
    def mock_agent(reply):
        agent = Mock()
        agent.chat = AsyncMock(return_value=reply)
        return agent

    @patch("src.main.get_agent")
    def test_plain_reply(self, mock_get_agent, client):
        mock_get_agent.return_value = self.mock_agent(ChatReply(text="Happy to help."))

        response = client.post(
            "/chat", json={"message": "Hi", "thread_id": "t1", "employee_id": "E001"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Happy to help."
        assert data["thread_id"] == "t1"
        assert data["step_payload"] is None

    @patch("src.main.get_agent")
    def test_start_hand_off_returns_first_step(self, mock_get_agent, client):
        mock_get_agent.return_value = self.mock_agent(
            ChatReply(text="Starting the wizard.", wizard_action="init")
        )

        data = client.post("/chat", json={"message": "I need leave", "thread_id": "t1"}).json()

        assert data["wizard_action"] == "init"
        assert data["step_payload"]["step"]["stepId"] == "step-1"
        assert data["step_text"].startswith("**One**")

    @patch("src.main.get_agent")
    def test_resume_hand_off(self, mock_get_agent, client, controller):
        controller.init("t1")
        mock_get_agent.return_value = self.mock_agent(
            ChatReply(text="Picking up.", wizard_action="resume")
        )

        data = client.post("/chat", json={"message": "continue", "thread_id": "t1"}).json()

        assert data["step_payload"]["step"]["stepId"] == "step-1"

    @patch("src.main.get_agent")
    def test_agent_failure(self, mock_get_agent, client):
        agent = Mock()
        agent.chat = AsyncMock(side_effect=RuntimeError("boom"))
        mock_get_agent.return_value = agent

        response = client.post("/chat", json={"message": "Hi", "thread_id": "t1"})

        assert response.status_code == 500

    def test_missing_message(self, client):
        response = client.post("/chat", json={"thread_id": "t1"})
        assert response.status_code == 422

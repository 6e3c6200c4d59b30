"""
Tests for response enrichment and validation directives.
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from src.errors import InvalidResponseError, UnknownQuestionError
from src.responses import enrich_responses, validate_response
from src.schemas import InputResponse


NOW = datetime(2030, 6, 15, 23, 30, tzinfo=timezone.utc)


def inputs(*pairs):
    return [InputResponse(question_id=q, value=v) for q, v in pairs]


class TestEnrichResponses:
    def test_semantic_tag_comes_from_config(self, intake_config):
        answered_at = datetime(2030, 5, 1, tzinfo=timezone.utc)

        enriched = enrich_responses(
            intake_config,
            "step-leave-type",
            inputs(("q-leave-type", "medical"), ("q-leave-duration", "12_weeks")),
            answered_at=answered_at,
        )

        assert [(r.question_id, r.semantic_tag, r.value) for r in enriched] == [
            ("q-leave-type", "INTAKE:QUESTION:LEAVE_TYPE", "medical"),
            ("q-leave-duration", "INTAKE:QUESTION:LEAVE_DURATION", "12_weeks"),
        ]
        assert all(r.answered_at == answered_at for r in enriched)

    def test_unknown_question_rejects_batch(self, intake_config):
        with pytest.raises(UnknownQuestionError) as exc_info:
            enrich_responses(
                intake_config,
                "step-leave-type",
                inputs(("q-leave-type", "medical"), ("q-ghost", "x")),
            )

        assert exc_info.value.question_id == "q-ghost"
        assert exc_info.value.wizard_id == "leave-intake-v1"

    def test_step_without_questions_accepts_empty_batch(self, intake_config):
        assert enrich_responses(intake_config, "step-review", []) == []

    def test_omitted_required_question_rejects_batch(self, intake_config):
        with pytest.raises(InvalidResponseError, match="required") as exc_info:
            enrich_responses(
                intake_config, "step-leave-type", inputs(("q-leave-type", "medical"))
            )

        assert exc_info.value.question_id == "q-leave-duration"

    def test_empty_batch_on_required_step_rejected(self, intake_config):
        with pytest.raises(InvalidResponseError):
            enrich_responses(intake_config, "step-leave-type", [])

    def test_question_from_another_step_rejected(self, intake_config):
        with pytest.raises(InvalidResponseError, match="belongs to step step-work-info") as exc_info:
            enrich_responses(
                intake_config,
                "step-leave-type",
                inputs(
                    ("q-leave-type", "medical"),
                    ("q-leave-duration", "8_weeks"),
                    ("q-work-state", "CA"),
                ),
            )

        assert exc_info.value.question_id == "q-work-state"


class TestValidationDirectives:
    def test_required_rejects_blank(self, intake_config):
        question = intake_config.find_question("q-manager-name")

        with pytest.raises(InvalidResponseError, match="required"):
            validate_response(question, "   ")

    @patch("src.responses.utc_now", return_value=NOW)
    def test_future_date_accepts_future(self, mock_now, intake_config):
        question = intake_config.find_question("q-expected-date")

        validate_response(question, "2030-06-16")

    @pytest.mark.parametrize("value", ["2001-01-01", "2030-06-15"])
    @patch("src.responses.utc_now", return_value=NOW)
    def test_future_date_rejects_past_and_today(self, mock_now, intake_config, value):
        question = intake_config.find_question("q-expected-date")

        with pytest.raises(InvalidResponseError, match="not in the future"):
            validate_response(question, value)

    @patch("src.responses.utc_now", return_value=NOW)
    def test_today_follows_utc_not_host_clock(self, mock_now, intake_config):
        # 23:30 UTC on June 15 is already June 16 east of UTC
        question = intake_config.find_question("q-expected-date")

        with pytest.raises(InvalidResponseError, match="not in the future"):
            validate_response(question, "2030-06-15")
        validate_response(question, "2030-06-16")

    def test_future_date_rejects_garbage(self, intake_config):
        question = intake_config.find_question("q-expected-date")

        with pytest.raises(InvalidResponseError, match="not a valid date"):
            validate_response(question, "someday soon")

    def test_options_are_enforced(self, intake_config):
        question = intake_config.find_question("q-work-state")

        validate_response(question, "CA")
        with pytest.raises(InvalidResponseError):
            validate_response(question, "California")

    def test_free_text_is_accepted(self, intake_config):
        question = intake_config.find_question("q-physician-name")

        validate_response(question, "Dr. Jane Roe")

    def test_unknown_directive_is_ignored(self, intake_config):
        question = intake_config.find_question("q-physician-name")
        relaxed = question.model_copy(
            update={
                "attributes": question.attributes.model_copy(update={"validation": ["maxLength"]})
            }
        )

        validate_response(relaxed, "")

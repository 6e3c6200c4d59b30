"""
Response enrichment and validation.

The UI submits bare ``InputResponse`` values. Before they are appended to a
session each one is bound to its question in the config: the semantic tag is
taken from the config (never from the client) and the value is checked
against the question's validation directives.
"""

import logging
from datetime import datetime

from dateutil import parser
from dateutil.parser import ParserError

from src.errors import InvalidResponseError, UnknownQuestionError
from src.schemas import InputResponse, QuestionElement, Response, WizardConfig, utc_now

logger = logging.getLogger(__name__)


def _check_required(question: QuestionElement, value: str) -> None:
    if not value.strip():
        raise InvalidResponseError(question.attributes.question_id, "a value is required")


def _check_future_date(question: QuestionElement, value: str) -> None:
    if not value.strip():
        return
    try:
        parsed = parser.parse(value)
    except (ParserError, ValueError, OverflowError) as e:
        raise InvalidResponseError(
            question.attributes.question_id, f"'{value}' is not a valid date"
        ) from e
    if parsed.date() <= utc_now().date():
        raise InvalidResponseError(
            question.attributes.question_id, f"{parsed.date().isoformat()} is not in the future"
        )


VALIDATORS = {
    "required": _check_required,
    "futureDate": _check_future_date,
}


def validate_response(question: QuestionElement, value: str) -> None:
    """
    Apply a question's validation directives to a raw value.

    Directives without a server-side check are left to the UI. Questions with
    an option list only accept one of the option values (blank is allowed
    unless the question is required).

    Raises:
        InvalidResponseError: the value breaks a directive
    """
    for directive in question.attributes.validation or []:
        check = VALIDATORS.get(directive)
        if check is None:
            logger.debug(f"No server-side check for directive '{directive}'")
            continue
        check(question, value)

    options = question.attributes.options
    if options and value.strip():
        allowed = {o.value for o in options}
        if value not in allowed:
            raise InvalidResponseError(
                question.attributes.question_id,
                f"'{value}' is not one of {sorted(allowed)}",
            )


def enrich_responses(
    config: WizardConfig,
    step_id: str,
    inputs: list[InputResponse],
    answered_at: datetime | None = None,
) -> list[Response]:
    """
    Turn raw inputs for ``step_id`` into enriched responses, preserving
    submission order.

    Only questions placed on ``step_id`` are accepted. A visible required
    question of the step that is left out of the batch counts as blank. All
    inputs are resolved and validated before anything is returned, so a
    single bad input rejects the whole batch.

    Raises:
        UnknownQuestionError: a question id is not defined in ``config``
        InvalidResponseError: a value fails validation, belongs to another
            step, or a required question is unanswered
    """
    answered_at = answered_at or utc_now()
    enriched = []

    for item in inputs:
        question = config.find_question(item.question_id)
        if question is None:
            raise UnknownQuestionError(item.question_id, config.wizard_id)

        if question.step_id != step_id:
            raise InvalidResponseError(
                item.question_id, f"belongs to step {question.step_id}, not {step_id}"
            )

        validate_response(question, item.value)

        enriched.append(
            Response(
                question_id=item.question_id,
                semantic_tag=question.attributes.semantic_tag,
                value=item.value,
                answered_at=answered_at,
            )
        )

    answered = {item.question_id for item in inputs}
    for element in config.elements_for_step(step_id):
        if not isinstance(element, QuestionElement) or not element.is_visible:
            continue
        if element.attributes.question_id not in answered:
            validate_response(element, "")

    return enriched

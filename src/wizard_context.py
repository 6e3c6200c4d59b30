"""
Read-only summary of a thread's wizard progress.

Used by the chat assistant (so it can answer "what did I put for my manager?"
or "what's left?") and by the context endpoint. Lists every step with a
status, its visibility rule and the latest answer to each of its questions.
"""

from typing import Literal

from src.schemas import SessionStatus, WizardCheckpoint, WizardConfig, WizardModel

StepStatus = Literal["completed", "current", "skipped", "upcoming", "conditional"]


class QuestionContext(WizardModel):
    question_id: str
    question_text: str
    response: str | None = None
    response_label: str | None = None


class StepContext(WizardModel):
    step_id: str
    title: str
    status: StepStatus
    condition: str | None = None
    questions: list[QuestionContext]


class WizardContext(WizardModel):
    status: Literal["not_started", "in-progress", "review", "completed", "abandoned"]
    session_id: str | None = None
    current_step_id: str | None = None
    steps: list[StepContext] = []


def _response_label(config: WizardConfig, question_id: str, value: str) -> str:
    question = config.find_question(question_id)
    options = question.attributes.options if question else None
    if not options:
        return value
    return next((o.label for o in options if o.value == value), value)


def build_wizard_context(checkpoint: WizardCheckpoint | None, config: WizardConfig) -> WizardContext:
    """Summarize ``checkpoint`` against ``config``; ``not_started`` without a checkpoint."""
    if checkpoint is None:
        return WizardContext(status="not_started")

    session = checkpoint.session
    latest = {r.question_id: r.value for r in session.responses}
    skipped = set(checkpoint.skipped_step_ids)

    current = config.get_step(session.current_step_id)
    current_sort = current.sort if current else None
    finished = session.status == SessionStatus.COMPLETED

    steps = []
    for step in sorted(config.steps, key=lambda s: s.sort):
        if step.step_id in skipped:
            status = "skipped"
        elif step.step_id == session.current_step_id and not finished:
            status = "current"
        elif current_sort is not None and (
            step.sort < current_sort or (finished and step.sort == current_sort)
        ):
            status = "completed"
        elif step.has_rule:
            status = "conditional"
        else:
            status = "upcoming"

        questions = []
        for element in config.elements_for_step(step.step_id):
            if element.type != "question":
                continue
            question_id = element.attributes.question_id
            response = latest.get(question_id)
            questions.append(
                QuestionContext(
                    question_id=question_id,
                    question_text=element.attributes.question_text,
                    response=response,
                    response_label=(
                        _response_label(config, question_id, response) if response else None
                    ),
                )
            )

        steps.append(
            StepContext(
                step_id=step.step_id,
                title=step.title,
                status=status,
                condition=step.rule,
                questions=questions,
            )
        )

    return WizardContext(
        status=session.status.value,
        session_id=session.session_id,
        current_step_id=session.current_step_id,
        steps=steps,
    )

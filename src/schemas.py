"""
Wizard data model.

Python attributes are snake_case; the wire format (API payloads, persisted
checkpoints, wizard config data) is camelCase, e.g. ``stepId``. All models are
frozen: transitions build new values with ``model_copy(update=...)``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WizardModel(BaseModel):
    """Base model: camelCase aliases, immutable instances."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


class Step(WizardModel):
    """A discrete phase of the wizard. No rule means always visible."""

    step_id: str
    sort: int
    name: str
    title: str
    semantic_tag: str
    rule: str | None = None
    rule_context: str | None = None

    @property
    def has_rule(self) -> bool:
        return bool(self.rule and self.rule.strip())


# ---------------------------------------------------------------------------
# Element attributes
# ---------------------------------------------------------------------------


class BaseAttributes(WizardModel):
    """Attributes shared by every element; unknown keys are kept for the UI."""

    model_config = ConfigDict(extra="allow")

    component_type_key: str


class QuestionOption(WizardModel):
    option_id: str
    sort: int
    label: str
    value: str


class QuestionAttributes(BaseAttributes):
    question_id: str
    semantic_tag: str
    question_text: str
    helper_text: str | None = None
    options: list[QuestionOption] | None = None
    validation: list[str] | None = None


class InfoAttributes(BaseAttributes):
    info_id: str
    title: str
    content: str


class DocumentAttributes(BaseAttributes):
    name: str
    file_name: str
    download_url: str


# ---------------------------------------------------------------------------
# Elements (tagged union on ``type``)
# ---------------------------------------------------------------------------


class ElementBase(WizardModel):
    element_id: str
    step_id: str
    sort: int
    is_visible: bool = True


class QuestionElement(ElementBase):
    type: Literal["question"] = "question"
    attributes: QuestionAttributes


class InfoElement(ElementBase):
    type: Literal["info"] = "info"
    attributes: InfoAttributes


class DocumentElement(ElementBase):
    type: Literal["document"] = "document"
    attributes: DocumentAttributes


class DefaultElement(ElementBase):
    """Fallback variant. Unrecognised element types are parsed into this one."""

    type: Literal["default"] = "default"
    attributes: BaseAttributes

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str:
        return "default"


ELEMENT_TYPES = ("question", "info", "document")


def _element_kind(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return kind if kind in ELEMENT_TYPES else "default"


Element = Annotated[
    Union[
        Annotated[QuestionElement, Tag("question")],
        Annotated[InfoElement, Tag("info")],
        Annotated[DocumentElement, Tag("document")],
        Annotated[DefaultElement, Tag("default")],
    ],
    Discriminator(_element_kind),
]


# ---------------------------------------------------------------------------
# Wizard config
# ---------------------------------------------------------------------------


class WizardConfig(WizardModel):
    """
    Static, validated definition of an intake flow.

    Structural rules checked on construction:
    - at least one step
    - unique step ids and unique step sort values
    - unique element ids
    - every element references an existing step
    """

    wizard_id: str
    wizard_name: str
    steps: list[Step]
    elements: list[Element] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_structure(self) -> WizardConfig:
        problems: list[str] = []

        if not self.steps:
            problems.append("Config must have at least one step")

        step_ids: set[str] = set()
        sorts: set[int] = set()
        for step in self.steps:
            if step.step_id in step_ids:
                problems.append(f"Duplicate stepId: {step.step_id}")
            if step.sort in sorts:
                problems.append(f"Duplicate step sort: {step.sort} ({step.step_id})")
            step_ids.add(step.step_id)
            sorts.add(step.sort)

        element_ids: set[str] = set()
        for element in self.elements:
            if element.element_id in element_ids:
                problems.append(f"Duplicate elementId: {element.element_id}")
            element_ids.add(element.element_id)
            if element.step_id not in step_ids:
                problems.append(
                    f'Element "{element.element_id}" references non-existent step '
                    f'"{element.step_id}"'
                )

        if problems:
            raise ValueError("; ".join(problems))
        return self

    def get_step(self, step_id: str) -> Step | None:
        return next((s for s in self.steps if s.step_id == step_id), None)

    def first_step(self) -> Step:
        return min(self.steps, key=lambda s: s.sort)

    def steps_after(self, step: Step) -> list[Step]:
        """Steps sorted strictly after ``step``, in ascending sort order."""
        return sorted((s for s in self.steps if s.sort > step.sort), key=lambda s: s.sort)

    def elements_for_step(self, step_id: str) -> list[Element]:
        return sorted((e for e in self.elements if e.step_id == step_id), key=lambda e: e.sort)

    def questions(self) -> list[QuestionElement]:
        return [e for e in self.elements if isinstance(e, QuestionElement)]

    def find_question(self, question_id: str) -> QuestionElement | None:
        return next(
            (q for q in self.questions() if q.attributes.question_id == question_id), None
        )

    def question_semantic_tags(self) -> set[str]:
        return {q.attributes.semantic_tag for q in self.questions()}


# ---------------------------------------------------------------------------
# Responses and sessions
# ---------------------------------------------------------------------------


class InputResponse(WizardModel):
    """What the UI submits: a question id and a raw value."""

    question_id: str
    value: str


class Response(WizardModel):
    """Enriched answer. The semantic tag always comes from the config."""

    question_id: str
    semantic_tag: str
    value: str
    answered_at: datetime


class SessionStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class WizardSession(WizardModel):
    session_id: str
    wizard_id: str
    employee_id: str
    created_at: datetime
    updated_at: datetime
    current_step_id: str
    status: SessionStatus = SessionStatus.IN_PROGRESS
    responses: list[Response] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.IN_PROGRESS


class StepPayload(WizardModel):
    """What the UI renders for the current step."""

    step: Step
    elements: list[Element]
    session: WizardSession | None = None

    @property
    def is_complete(self) -> bool:
        return self.step.step_id == COMPLETE_STEP_ID


COMPLETE_STEP_ID = "complete"


# ---------------------------------------------------------------------------
# Flow requests and persisted state
# ---------------------------------------------------------------------------


class WizardAction(str, Enum):
    INIT = "init"
    RESPOND = "respond"
    RESUME = "resume"


class WizardRequest(WizardModel):
    """Inbound wizard action."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "action": "respond",
                "stepId": "step-leave-type",
                "inputResponses": [
                    {"questionId": "q-leave-type", "value": "medical"},
                    {"questionId": "q-leave-duration", "value": "8_weeks"},
                ],
            }
        }
    )

    action: WizardAction
    employee_id: str | None = None
    wizard_id: str | None = None
    step_id: str | None = None
    input_responses: list[InputResponse] = Field(default_factory=list)


class WizardCheckpoint(WizardModel):
    """Everything persisted for a thread between invocations."""

    thread_id: str
    session: WizardSession
    step_rule_results: dict[str, bool] = Field(default_factory=dict)
    skipped_step_ids: list[str] = Field(default_factory=list)
    saved_at: datetime = Field(default_factory=utc_now)

"""
Step payload builder.

Projects (step, config, session) into the StepPayload the UI renders. When
there is no step the wizard is finished and the fixed "complete" step with no
elements is returned: that sentinel is the only signal that no more input is
expected.
"""

from src.schemas import (
    COMPLETE_STEP_ID,
    DocumentElement,
    Element,
    InfoElement,
    QuestionElement,
    Step,
    StepPayload,
    WizardConfig,
    WizardSession,
)

COMPLETE_STEP = Step(
    step_id=COMPLETE_STEP_ID,
    sort=999,
    name="complete",
    title="Wizard Complete",
    semantic_tag="WIZARD:COMPLETE",
)


def build_step_payload(
    step: Step | None,
    config: WizardConfig | None,
    session: WizardSession | None,
) -> StepPayload:
    """Build the payload for ``step``; ``None`` yields the completion sentinel."""
    if step is None or config is None:
        return StepPayload(step=COMPLETE_STEP, elements=[], session=session)

    return StepPayload(step=step, elements=config.elements_for_step(step.step_id), session=session)


# ---------------------------------------------------------------------------
# Plain-text rendering (chat transcripts, logs)
# ---------------------------------------------------------------------------


def _render_select(element: QuestionElement) -> str:
    options = sorted(element.attributes.options or [], key=lambda o: o.sort)
    lines = [f"- {element.attributes.question_text}"]
    lines += [f"    - {o.label}" for o in options]
    return "\n".join(lines)


def _render_checkbox(element: QuestionElement) -> str:
    return f"- [ ] {element.attributes.question_text}"


def _render_text_input(element: QuestionElement) -> str:
    text = f"- {element.attributes.question_text}"
    if element.attributes.helper_text:
        text += f" ({element.attributes.helper_text})"
    return text


QUESTION_RENDERERS = {
    "select": _render_select,
    "checkbox": _render_checkbox,
    "text": _render_text_input,
    "datePicker": _render_text_input,
}


def _render_question(element: QuestionElement) -> str:
    renderer = QUESTION_RENDERERS.get(element.attributes.component_type_key, _render_text_input)
    return renderer(element)


def _render_info(element: InfoElement) -> str:
    return f"> **{element.attributes.title}**\n> {element.attributes.content}"


def _render_document(element: DocumentElement) -> str:
    return f"- [{element.attributes.name}]({element.attributes.download_url})"


def _render_default(element: Element) -> str:
    return f"- ({element.attributes.component_type_key})"


ELEMENT_RENDERERS = {
    "question": _render_question,
    "info": _render_info,
    "document": _render_document,
    "default": _render_default,
}


def render_element(element: Element) -> str:
    """Render one element as markdown; unknown element kinds get the default renderer."""
    return ELEMENT_RENDERERS.get(element.type, _render_default)(element)


def render_step_text(payload: StepPayload) -> str:
    """Markdown summary of a payload for the chat transcript."""
    if payload.is_complete:
        return "Your leave request has been submitted successfully!"

    lines = [f"**{payload.step.title}**"]
    lines += [render_element(e) for e in payload.elements if e.is_visible]
    return "\n".join(lines)

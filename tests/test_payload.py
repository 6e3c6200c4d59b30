"""
Tests for the step payload builder and its markdown rendering.
"""

from src.payload import build_step_payload, render_element, render_step_text
from src.schemas import COMPLETE_STEP_ID, WizardConfig


class TestBuildStepPayload:
    def test_elements_follow_sort(self, simple_config, make_session):
        session = make_session("step-3")
        step = simple_config.get_step("step-3")

        payload = build_step_payload(step, simple_config, session)

        assert payload.step == step
        assert [e.element_id for e in payload.elements] == ["el-notes-a", "el-notes-b"]
        assert payload.session == session
        assert not payload.is_complete

    def test_no_step_yields_sentinel(self, simple_config, make_session):
        payload = build_step_payload(None, simple_config, make_session())

        assert payload.step.step_id == COMPLETE_STEP_ID
        assert payload.step.sort == 999
        assert payload.step.name == "complete"
        assert payload.step.title == "Wizard Complete"
        assert payload.step.semantic_tag == "WIZARD:COMPLETE"
        assert payload.elements == []
        assert payload.is_complete

    def test_no_config_yields_sentinel(self, make_session):
        assert build_step_payload(None, None, None).is_complete

    def test_serializes_with_camel_case(self, simple_config):
        payload = build_step_payload(simple_config.get_step("step-1"), simple_config, None)

        data = payload.model_dump(by_alias=True)

        assert data["step"]["stepId"] == "step-1"
        assert data["elements"][0]["attributes"]["questionId"] == "q-type"
        assert data["elements"][0]["type"] == "question"


class TestRenderStepText:
    def test_renders_select_options_in_order(self, intake_config):
        payload = build_step_payload(intake_config.get_step("step-work-info"), intake_config, None)

        text = render_step_text(payload)

        assert text.startswith("**Work Information**")
        assert text.index("California") < text.index("New York") < text.index("Texas")

    def test_renders_info_and_document(self, intake_config):
        payload = build_step_payload(
            intake_config.get_step("step-medical-docs"), intake_config, None
        )

        text = render_step_text(payload)

        assert "> **" in text
        assert "](" in text

    def test_hidden_elements_are_omitted(self, simple_config):
        step = simple_config.get_step("step-2")
        hidden = [e.model_copy(update={"is_visible": False}) for e in simple_config.elements_for_step("step-2")]
        payload = build_step_payload(step, simple_config, None).model_copy(update={"elements": hidden})

        assert render_step_text(payload) == "**Two**"

    def test_completion_text(self):
        assert "submitted" in render_step_text(build_step_payload(None, None, None))

    def test_unknown_element_uses_default_renderer(self):
        config = WizardConfig.model_validate(
            {
                "wizardId": "w",
                "wizardName": "W",
                "steps": [{"stepId": "s", "sort": 1, "name": "s", "title": "S", "semanticTag": "S"}],
                "elements": [
                    {
                        "elementId": "el-x",
                        "stepId": "s",
                        "type": "carousel",
                        "sort": 1,
                        "attributes": {"componentTypeKey": "carousel"},
                    }
                ],
            }
        )

        assert render_element(config.elements[0]) == "- (carousel)"

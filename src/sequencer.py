"""
Step sequencer.

Given a session, its config and a rule oracle, decide which step comes next:

1. Candidates are the steps sorted after the current one.
2. Steps without a rule pass unconditionally.
3. A rule that mentions a question tag the user has not answered fails
   without asking the oracle.
4. The remaining rules are judged by the oracle in one batch.
5. The next step is the first candidate, in sort order, that passed. Rules
   only gate steps, sort order alone decides sequence.

No candidate passing means the wizard is complete. Oracle failures propagate
untouched and nothing computed before the failure is returned.
"""

import logging
import re
from dataclasses import dataclass, field

from src.errors import PreconditionError
from src.observability import trace_span
from src.rule_oracle import (
    RuleEvaluationRequest,
    RuleOracle,
    RuleSpec,
    build_response_context,
    collect_verdicts,
)
from src.schemas import Step, WizardConfig, WizardSession, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NextStepResult:
    """Outcome of one sequencing pass."""

    next_step: Step | None
    rule_results: dict[str, bool]
    session: WizardSession
    skipped_steps: list[Step] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.next_step is None


def referenced_tags(rule: str, known_tags: set[str]) -> set[str]:
    """Question tags from ``known_tags`` that appear as whole tokens in ``rule``."""
    return {
        tag
        for tag in known_tags
        if re.search(rf"(?<![\w:]){re.escape(tag)}(?![\w:])", rule)
    }


async def determine_next_step(
    session: WizardSession | None,
    config: WizardConfig | None,
    oracle: RuleOracle,
) -> NextStepResult:
    """
    Compute the next presentable step for ``session``.

    Returns a NextStepResult whose ``session`` is a new value pointing at the
    selected step, or the unchanged input session when the wizard is complete.

    Raises:
        PreconditionError: config, session or its current step is missing
        OracleProtocolError / OracleUnavailableError: from the oracle call
    """
    if session is None or config is None:
        raise PreconditionError("Cannot determine next step without config and session")

    current = config.get_step(session.current_step_id)
    if current is None:
        raise PreconditionError(
            f"Current step {session.current_step_id} does not exist in wizard {config.wizard_id}"
        )

    candidates = config.steps_after(current)

    with trace_span(
        "sequencer.determine_next_step",
        session=session.session_id,
        current=current.step_id,
        candidates=len(candidates),
    ):
        if not candidates:
            logger.info(f"No steps after {current.step_id}; wizard {config.wizard_id} complete")
            return NextStepResult(next_step=None, rule_results={}, session=session)

        rule_results: dict[str, bool] = {s.step_id: True for s in candidates if not s.has_rule}
        rule_steps = [s for s in candidates if s.has_rule]

        if rule_steps:
            context = build_response_context(session.responses)
            known_tags = config.question_semantic_tags()
            to_evaluate: list[RuleSpec] = []

            for step in rule_steps:
                unanswered = referenced_tags(step.rule, known_tags) - context.keys()
                if unanswered:
                    logger.debug(
                        f"Rule for {step.step_id} depends on unanswered {sorted(unanswered)}"
                    )
                    rule_results[step.step_id] = False
                else:
                    to_evaluate.append(
                        RuleSpec(step_id=step.step_id, rule=step.rule, rule_context=step.rule_context)
                    )

            if to_evaluate:
                request = RuleEvaluationRequest(response_context=context, rules=to_evaluate)
                result = await oracle.evaluate(request)
                rule_results.update(collect_verdicts(request, result))

        ordered = {s.step_id: rule_results[s.step_id] for s in candidates}
        next_step = next((s for s in candidates if ordered[s.step_id]), None)

        if next_step is None:
            logger.info(f"All remaining steps of {config.wizard_id} failed their rules; complete")
            return NextStepResult(
                next_step=None, rule_results=ordered, session=session, skipped_steps=candidates
            )

        skipped = candidates[: candidates.index(next_step)]
        updated = session.model_copy(
            update={"current_step_id": next_step.step_id, "updated_at": utc_now()}
        )

        logger.info(
            f"Session {session.session_id}: {current.step_id} -> {next_step.step_id} "
            f"(skipped {[s.step_id for s in skipped]})"
        )
        return NextStepResult(
            next_step=next_step, rule_results=ordered, session=updated, skipped_steps=skipped
        )

"""
Rule oracle: judges natural-language step visibility rules.

The oracle is an external, non-deterministic collaborator (an LLM). The
engine only relies on its contract:

    input:  response context (semantic tag -> latest value) + rules to judge
    output: exactly one verdict per requested step id

Anything else coming back is a protocol violation and is rejected as a whole.
"""

import json
import logging
import re
from typing import Protocol

import litellm
from pydantic import ValidationError

from src.circuit_breaker import CircuitBreaker, CircuitBreakerOpenError
from src.config import settings
from src.errors import OracleProtocolError, OracleUnavailableError
from src.observability import trace_span
from src.schemas import Response, WizardModel

logger = logging.getLogger(__name__)


class RuleSpec(WizardModel):
    step_id: str
    rule: str
    rule_context: str | None = None


class RuleEvaluationRequest(WizardModel):
    response_context: dict[str, str]
    rules: list[RuleSpec]


class RuleResult(WizardModel):
    step_id: str
    is_rule_passed: bool


class RuleEvaluationResult(WizardModel):
    results: list[RuleResult]


class RuleOracle(Protocol):
    """Anything that can judge a batch of rules."""

    async def evaluate(self, request: RuleEvaluationRequest) -> RuleEvaluationResult: ...


def build_response_context(responses: list[Response]) -> dict[str, str]:
    """Flatten responses into semantic tag -> value. Later answers win."""
    context: dict[str, str] = {}
    for response in responses:
        context[response.semantic_tag] = response.value
    return context


def collect_verdicts(
    request: RuleEvaluationRequest, result: RuleEvaluationResult
) -> dict[str, bool]:
    """
    Check an oracle reply against its request and return the verdict map.

    Every requested step id must appear exactly once. Verdicts for step ids
    that were never requested are dropped.

    Raises:
        OracleProtocolError: a requested verdict is missing or duplicated
    """
    requested = {rule.step_id for rule in request.rules}
    verdicts: dict[str, bool] = {}

    for item in result.results:
        if item.step_id not in requested:
            logger.warning(f"Rule oracle returned a verdict for unrequested step {item.step_id}")
            continue
        if item.step_id in verdicts:
            raise OracleProtocolError(f"Rule oracle returned duplicate verdicts for {item.step_id}")
        verdicts[item.step_id] = item.is_rule_passed

    missing = sorted(requested - verdicts.keys())
    if missing:
        raise OracleProtocolError(f"Rule oracle omitted verdicts for steps: {', '.join(missing)}")

    return verdicts


# ---------------------------------------------------------------------------
# LLM-backed oracle
# ---------------------------------------------------------------------------

RULE_ORACLE_INSTRUCTION = """You evaluate boolean conditions against a user's answers to a leave request form.

Answers are given as a JSON object mapping a question key to the answer value.
The form is dynamic: a question key that is absent has not been answered yet or will
never be shown to this user. Any condition on an absent key is FALSE.

Reply with a JSON object of the form
{"results": [{"stepId": "<stepId>", "isRulePassed": true|false}, ...]}
containing exactly one entry per rule. No explanation."""


def format_rule_for_prompt(rule: RuleSpec) -> str:
    formatted = f'- stepId: "{rule.step_id}"\n  rule: "{rule.rule}"'
    if rule.rule_context:
        formatted += f'\n  context: "{rule.rule_context}"'
    return formatted


def build_rule_prompt(request: RuleEvaluationRequest) -> str:
    answers = json.dumps(request.response_context, indent=2)
    rules = "\n\n".join(format_rule_for_prompt(r) for r in request.rules)
    return f"## User Responses\n{answers}\n\n## Rules to Evaluate\n{rules}"


JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def parse_rule_evaluation(content: str) -> RuleEvaluationResult:
    """
    Parse the raw model output. Tolerates markdown fences around the JSON.

    Raises:
        OracleProtocolError: no JSON object, or it does not match the schema
    """
    match = JSON_OBJECT_PATTERN.search(content or "")
    if not match:
        raise OracleProtocolError("Rule oracle did not return a JSON object")

    try:
        return RuleEvaluationResult.model_validate_json(match.group(0))
    except ValidationError as e:
        raise OracleProtocolError(f"Rule oracle returned malformed verdicts: {e}") from e


class LiteLlmRuleOracle:
    """
    Rule oracle backed by a chat completion model through LiteLLM.

    One completion call per batch. Transport failures, timeouts and an open
    circuit are raised as OracleUnavailableError (the caller may retry the
    whole request); bad output is raised as OracleProtocolError.
    """

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        circuit_breaker: CircuitBreaker | None = None,
    ):
        self.model = model or settings.rule_oracle_model
        self.api_key = api_key or settings.openai_api_key
        self.timeout = timeout or settings.rule_oracle_timeout_seconds
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=settings.circuit_breaker_failure_threshold,
            timeout=settings.circuit_breaker_timeout,
            name="RuleOracleCircuitBreaker",
        )

    async def _complete(self, prompt: str) -> str:
        response = await litellm.acompletion(
            model=self.model,
            messages=[
                {"role": "system", "content": RULE_ORACLE_INSTRUCTION},
                {"role": "user", "content": prompt},
            ],
            temperature=0,
            response_format={"type": "json_object"},
            timeout=self.timeout,
            api_key=self.api_key,
        )
        return response.choices[0].message.content or ""

    async def evaluate(self, request: RuleEvaluationRequest) -> RuleEvaluationResult:
        if not request.rules:
            return RuleEvaluationResult(results=[])

        prompt = build_rule_prompt(request)

        with trace_span("rule_oracle.evaluate", model=self.model, rules=len(request.rules)):
            try:
                content = await self.circuit_breaker.call(self._complete, prompt)
            except CircuitBreakerOpenError as e:
                raise OracleUnavailableError(str(e)) from e
            except Exception as e:
                raise OracleUnavailableError(f"Rule oracle call failed: {e}") from e

            return parse_rule_evaluation(content)

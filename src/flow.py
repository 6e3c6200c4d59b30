"""
Wizard flow controller.

Routes the three wizard actions and owns every session mutation:

    init     no session yet   -> new session at the first step
    respond  in-progress      -> append responses, advance or complete
    resume   any session      -> re-present the pending step, no mutation

Each call runs to completion. The only state carried between calls is the
checkpoint in the session store, written once at the very end of a
successful transition, so a failed call leaves the stored session untouched.

respond calls on one thread are serialized by a per-thread lock, and the
final save is refused if the stored checkpoint changed underneath it, so two
overlapping answers for the same step cannot both be accepted.
"""

import asyncio
import logging
import uuid
import weakref

from src.config import settings
from src.errors import (
    PreconditionError,
    SessionNotActiveError,
    SessionNotFoundError,
    StepMismatchError,
)
from src.observability import trace_span
from src.payload import build_step_payload
from src.responses import enrich_responses
from src.rule_oracle import LiteLlmRuleOracle, RuleOracle
from src.schemas import (
    InputResponse,
    SessionStatus,
    StepPayload,
    WizardAction,
    WizardCheckpoint,
    WizardRequest,
    WizardSession,
    utc_now,
)
from src.sequencer import determine_next_step
from src.session_store import SessionStore, session_store
from src.wizard_config import load_wizard_config
from src.wizard_context import WizardContext, build_wizard_context

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return f"sess-{uuid.uuid4().hex[:12]}"


class WizardFlowController:
    """Runs wizard actions against persisted checkpoints."""

    def __init__(
        self,
        oracle: RuleOracle,
        store: SessionStore | None = None,
        config_loader=load_wizard_config,
        default_wizard_id: str | None = None,
    ):
        self.oracle = oracle
        self.store = store if store is not None else session_store
        self.config_loader = config_loader
        self.default_wizard_id = default_wizard_id or settings.default_wizard_id
        # thread_id -> lock held across load, sequencing and save in respond
        self._thread_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _thread_lock(self, thread_id: str) -> asyncio.Lock:
        lock = self._thread_locks.get(thread_id)
        if lock is None:
            lock = asyncio.Lock()
            self._thread_locks[thread_id] = lock
        return lock

    def _save_over(self, loaded: WizardCheckpoint, checkpoint: WizardCheckpoint) -> None:
        """
        Save ``checkpoint`` only if the store still holds ``loaded``.

        init and abandon do not wait for the thread lock, so one of them may
        have replaced the session while the oracle was being awaited.
        """
        stored = self.store.load(loaded.thread_id)
        if stored is None:
            raise SessionNotFoundError(loaded.thread_id)
        if stored.saved_at != loaded.saved_at or stored.session != loaded.session:
            if not stored.session.is_active:
                raise SessionNotActiveError(
                    f"Session {stored.session.session_id} is {stored.session.status.value}; "
                    "start a new request"
                )
            raise StepMismatchError(
                loaded.session.current_step_id, stored.session.current_step_id
            )
        self.store.save(checkpoint)

    async def handle(self, thread_id: str, request: WizardRequest) -> StepPayload:
        """Dispatch a wizard request to the matching action."""
        if request.action == WizardAction.INIT:
            return self.init(thread_id, employee_id=request.employee_id, wizard_id=request.wizard_id)
        if request.action == WizardAction.RESPOND:
            return await self.respond(thread_id, request.step_id, request.input_responses)
        if request.action == WizardAction.RESUME:
            return self.resume(thread_id)
        raise PreconditionError(f"Unknown action: {request.action}")

    def _load(self, thread_id: str) -> WizardCheckpoint:
        checkpoint = self.store.load(thread_id)
        if checkpoint is None:
            raise SessionNotFoundError(thread_id)
        return checkpoint

    def init(
        self,
        thread_id: str,
        employee_id: str | None = None,
        wizard_id: str | None = None,
    ) -> StepPayload:
        """
        Start a new session on ``thread_id`` at the config's first step.

        Any previous session on the thread is replaced.
        """
        wizard_id = wizard_id or self.default_wizard_id

        with trace_span("flow.init", thread=thread_id, wizard=wizard_id):
            config = self.config_loader(wizard_id)

            previous = self.store.load(thread_id)
            if previous is not None and previous.session.is_active:
                logger.warning(
                    f"Thread {thread_id}: replacing in-progress session "
                    f"{previous.session.session_id} with a new one"
                )

            first_step = config.first_step()
            now = utc_now()
            session = WizardSession(
                session_id=new_session_id(),
                wizard_id=config.wizard_id,
                employee_id=employee_id or "unknown",
                created_at=now,
                updated_at=now,
                current_step_id=first_step.step_id,
                status=SessionStatus.IN_PROGRESS,
                responses=[],
            )

            self.store.save(WizardCheckpoint(thread_id=thread_id, session=session))
            logger.info(f"Thread {thread_id}: started session {session.session_id} ({wizard_id})")

            return build_step_payload(first_step, config, session)

    async def respond(
        self,
        thread_id: str,
        step_id: str | None,
        inputs: list[InputResponse],
    ) -> StepPayload:
        """
        Record the answers for the pending step and move to the next one.

        Raises:
            SessionNotFoundError: nothing stored for the thread
            SessionNotActiveError: the session is completed or abandoned
            StepMismatchError: ``step_id`` is not the pending step
            UnknownQuestionError / InvalidResponseError: bad input
            OracleProtocolError / OracleUnavailableError: rule evaluation failed
        """
        async with self._thread_lock(thread_id):
            with trace_span("flow.respond", thread=thread_id, step=step_id, responses=len(inputs)):
                checkpoint = self._load(thread_id)
                session = checkpoint.session

                if not session.is_active:
                    raise SessionNotActiveError(
                        f"Session {session.session_id} is {session.status.value}; "
                        "start a new request"
                    )

                if step_id != session.current_step_id:
                    raise StepMismatchError(step_id, session.current_step_id)

                config = self.config_loader(session.wizard_id)

                now = utc_now()
                enriched = enrich_responses(config, step_id, inputs, answered_at=now)
                session = session.model_copy(
                    update={"responses": [*session.responses, *enriched], "updated_at": now}
                )

                outcome = await determine_next_step(session, config, self.oracle)

                session = outcome.session
                if outcome.is_complete:
                    session = session.model_copy(
                        update={"status": SessionStatus.COMPLETED, "updated_at": utc_now()}
                    )
                    logger.info(f"Thread {thread_id}: session {session.session_id} completed")

                self._save_over(
                    checkpoint,
                    checkpoint.model_copy(
                        update={
                            "session": session,
                            "step_rule_results": {
                                **checkpoint.step_rule_results,
                                **outcome.rule_results,
                            },
                            "skipped_step_ids": [
                                *checkpoint.skipped_step_ids,
                                *(s.step_id for s in outcome.skipped_steps),
                            ],
                            "saved_at": utc_now(),
                        }
                    ),
                )

                return build_step_payload(outcome.next_step, config, session)

    def resume(self, thread_id: str) -> StepPayload:
        """Re-present the pending step (the completion sentinel once completed). Read-only."""
        checkpoint = self._load(thread_id)
        session = checkpoint.session

        if session.status == SessionStatus.ABANDONED:
            raise SessionNotActiveError(f"Session {session.session_id} was abandoned")

        config = self.config_loader(session.wizard_id)

        if session.status == SessionStatus.COMPLETED:
            return build_step_payload(None, config, session)

        step = config.get_step(session.current_step_id)
        if step is None:
            raise PreconditionError(
                f"Session {session.session_id} points at unknown step {session.current_step_id}"
            )
        return build_step_payload(step, config, session)

    def abandon(self, thread_id: str) -> WizardSession:
        """Mark the in-progress session on ``thread_id`` as abandoned."""
        checkpoint = self._load(thread_id)
        session = checkpoint.session

        if not session.is_active:
            raise SessionNotActiveError(
                f"Session {session.session_id} is {session.status.value}; nothing to abandon"
            )

        session = session.model_copy(
            update={"status": SessionStatus.ABANDONED, "updated_at": utc_now()}
        )
        self.store.save(checkpoint.model_copy(update={"session": session, "saved_at": utc_now()}))
        logger.info(f"Thread {thread_id}: session {session.session_id} abandoned")
        return session

    def get_checkpoint(self, thread_id: str) -> WizardCheckpoint | None:
        return self.store.load(thread_id)

    def context(self, thread_id: str) -> WizardContext:
        """Summarize progress on ``thread_id`` (``not_started`` when there is no session)."""
        checkpoint = self.store.load(thread_id)
        wizard_id = checkpoint.session.wizard_id if checkpoint else self.default_wizard_id
        return build_wizard_context(checkpoint, self.config_loader(wizard_id))


# Global controller instance
flow_controller = None


def get_flow_controller() -> WizardFlowController:
    """Get or create the global flow controller, wired to the LLM rule oracle."""
    global flow_controller
    if flow_controller is None:
        flow_controller = WizardFlowController(oracle=LiteLlmRuleOracle(), store=session_store)
    return flow_controller

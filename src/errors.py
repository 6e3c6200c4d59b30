"""
Wizard error taxonomy.

Every failure the engine can raise has its own class so callers can tell
"retry" apart from "resynchronize" apart from "this is a bug". Each class
carries a stable code, the HTTP status the API maps it to, and whether
retrying the same request can succeed.
"""


class WizardError(Exception):
    """Base class for all wizard engine failures."""

    code = "wizard_error"
    status_code = 500
    retryable = False


class PreconditionError(WizardError):
    """Required config, session or current step missing. Indicates a wiring bug."""

    code = "precondition_violation"


class StepMismatchError(WizardError):
    """Submitted step id differs from the session's pending step."""

    code = "step_mismatch"
    status_code = 409

    def __init__(self, received: str | None, expected: str):
        self.received = received
        self.expected = expected
        super().__init__(f'Step mismatch: received "{received}" but current step is "{expected}"')


class UnknownQuestionError(WizardError):
    """Question id cannot be resolved against the bound config (config/UI skew)."""

    code = "unknown_question"
    status_code = 422

    def __init__(self, question_id: str, wizard_id: str):
        self.question_id = question_id
        self.wizard_id = wizard_id
        super().__init__(f"No semanticTag found for questionId: {question_id} (wizard={wizard_id})")


class InvalidResponseError(WizardError):
    """A submitted value breaks one of its question's validation directives."""

    code = "invalid_response"
    status_code = 422

    def __init__(self, question_id: str, reason: str):
        self.question_id = question_id
        self.reason = reason
        super().__init__(f"Invalid response for {question_id}: {reason}")


class OracleProtocolError(WizardError):
    """The rule oracle returned a missing, duplicated or malformed verdict."""

    code = "oracle_protocol_violation"
    status_code = 502


class OracleUnavailableError(WizardError):
    """The rule oracle could not be reached (timeout, network, open circuit)."""

    code = "oracle_unavailable"
    status_code = 503
    retryable = True


class ConfigNotFoundError(WizardError):
    """No wizard config is registered under the requested identifier."""

    code = "unknown_wizard"
    status_code = 404

    def __init__(self, wizard_id: str):
        self.wizard_id = wizard_id
        super().__init__(f"Unknown wizard: {wizard_id}")


class InvalidConfigError(WizardError):
    """A registered wizard config failed structural validation."""

    code = "invalid_wizard_config"


class SessionNotFoundError(WizardError):
    """No checkpoint exists for the thread."""

    code = "session_not_found"
    status_code = 404

    def __init__(self, thread_id: str):
        self.thread_id = thread_id
        super().__init__(f"No wizard session for thread {thread_id}")


class SessionNotActiveError(WizardError):
    """The session is completed or abandoned and accepts no more input."""

    code = "session_not_active"
    status_code = 409

"""
Request-scoped execution context.

This module stores per-request metadata so that tools and the agent can share
execution state without passing parameters through every function.

Chat requests are served concurrently on one event loop, so the state lives in
a ContextVar rather than thread-local storage. The variable holds a mutable
object: tool calls that run in a copied context still write into the state of
the request that started them.

The chat tools never drive the wizard themselves. They record which hand-off
the assistant asked for (start or resume) and the HTTP layer performs it on
the flow controller after the agent run.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field

WIZARD_ACTIONS = ("init", "resume")


@dataclass
class RequestState:
    thread_id: str | None = None
    employee_id: str | None = None
    tools_called: list[str] = field(default_factory=list)
    wizard_action: str | None = None


_state: ContextVar[RequestState | None] = ContextVar("request_state", default=None)


def set_request_context(thread_id: str | None, employee_id: str | None) -> None:
    """Initialize request context for a single agent run."""
    _state.set(RequestState(thread_id=thread_id, employee_id=employee_id))


def _current() -> RequestState:
    state = _state.get()
    if state is None:
        state = RequestState()
        _state.set(state)
    return state


def register_tool_call(tool_name: str) -> None:
    """Record that a tool was executed."""
    _current().tools_called.append(tool_name)


def get_tools_called() -> list[str]:
    """Return tools executed in this request."""
    state = _state.get()
    return state.tools_called if state else []


def get_thread_id() -> str | None:
    """Return the conversation thread bound to this request."""
    state = _state.get()
    return state.thread_id if state else None


def get_session_employee() -> str | None:
    """Return employee bound to this request."""
    state = _state.get()
    return state.employee_id if state else None


def request_wizard_action(action: str) -> None:
    """Record a wizard hand-off; the last request in a run wins."""
    if action not in WIZARD_ACTIONS:
        raise ValueError(f"Unknown wizard action: {action}")
    _current().wizard_action = action


def get_wizard_action() -> str | None:
    state = _state.get()
    return state.wizard_action if state else None


def clear_request_context() -> None:
    """Clean up request context after response."""
    _state.set(None)

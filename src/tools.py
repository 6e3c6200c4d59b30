"""
Agent tools - functions the chat assistant can call.
Each tool must have:
1. Clear function name
2. Detailed docstring (this is how the agent learns what it does!)
3. Type hints with Annotated descriptions
4. JSON-serializable return type
"""

import logging
from typing import Annotated, Any

from src.flow import get_flow_controller
from src.observability import trace_span
from src.schemas import SessionStatus
from src.utils.request_context import (
    get_session_employee,
    get_thread_id,
    register_tool_call,
    request_wizard_action,
)

logger = logging.getLogger(__name__)


def get_wizard_context() -> Annotated[dict[str, Any], "Progress of the user's leave request"]:
    """
    Return the user's current leave request wizard progress.

    Architectural role
    ------------------
    This is the only source of truth for what the user has already answered.
    The model must never guess answers or assume which steps are done.

    The agent uses this whenever:
    - the user asks what they entered ("what did I put for my manager?")
    - the user asks what is left to do
    - before starting or resuming the wizard, to check whether one is running

    Returns:
        Dictionary with:
        - status: not_started, in-progress, completed or abandoned
        - steps: every step with status (completed, current, skipped,
          upcoming, conditional), its condition and the answers given
    """
    register_tool_call("get_wizard_context")
    thread_id = get_thread_id()

    with trace_span("get_wizard_context", thread=thread_id):
        if not thread_id:
            return {"status": "not_started", "steps": []}

        context = get_flow_controller().context(thread_id)
        logger.info(f"Wizard context for thread {thread_id}: {context.status}")
        return context.model_dump(mode="json")


def start_wizard() -> Annotated[dict[str, Any], "Hand-off confirmation"]:
    """
    Start the leave request wizard so the user can submit a leave of absence request.

    Use this tool when:
    - the user wants to request time off or leave
    - the user asks to start, begin or initiate a leave request
    - the user says they need to take leave (medical, family care, pregnancy/adoption)

    Do NOT use this tool if:
    - the user is only asking questions about leave policies
    - a wizard is already in progress (check get_wizard_context first and
      use resume_wizard instead)

    The wizard form is presented after your reply; do not collect the
    request details through chat.
    """
    register_tool_call("start_wizard")

    with trace_span("start_wizard", thread=get_thread_id()):
        request_wizard_action("init")
        return {
            "success": True,
            "message": "Wizard started. The leave request form will now be presented.",
        }


def resume_wizard() -> Annotated[dict[str, Any], "Hand-off confirmation"]:
    """
    Resume an in-progress leave request wizard and show the pending step.

    Use this tool when:
    - the user wants to continue their leave request
    - the user says "continue", "go back to the wizard" or "show me the next step"

    IMPORTANT: Only use this if get_wizard_context reports status
    'in-progress'. If no wizard is in progress, use start_wizard instead.
    """
    register_tool_call("resume_wizard")
    thread_id = get_thread_id()

    with trace_span("resume_wizard", thread=thread_id):
        checkpoint = get_flow_controller().get_checkpoint(thread_id) if thread_id else None
        if checkpoint is None or checkpoint.session.status != SessionStatus.IN_PROGRESS:
            return {
                "success": False,
                "error": "No leave request is in progress. Use start_wizard to begin one.",
            }

        employee_id = get_session_employee()
        if employee_id and checkpoint.session.employee_id not in (employee_id, "unknown"):
            logger.warning(
                f"Thread {thread_id}: employee {employee_id} tried to resume a request "
                f"owned by {checkpoint.session.employee_id}"
            )
            return {
                "success": False,
                "error": "This leave request belongs to another employee. "
                "Use start_wizard to begin your own.",
            }

        request_wizard_action("resume")
        return {
            "success": True,
            "message": "Wizard resumed. The pending step will now be presented.",
        }


# Export all tools
AGENT_TOOLS = [get_wizard_context, start_wizard, resume_wizard]

"""
Chat assistant implementation using Google ADK.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any

from google.adk import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.runners import InMemoryRunner
from google.genai import types

from src.config import settings
from src.observability import trace_span
from src.tools import AGENT_TOOLS
from src.utils.request_context import (
    clear_request_context,
    get_tools_called,
    get_wizard_action,
    set_request_context,
)

logger = logging.getLogger(__name__)


# Agent system instruction
AGENT_INSTRUCTION = """You are a helpful HR assistant specializing in employee leave requests.

You can help with:
- Explaining leave types (medical, family care, pregnancy and adoption, state programs)
- Answering general questions about leave eligibility and the request process
- Telling the user what they already entered in their leave request and what is left
- Starting or resuming the leave request wizard

IMPORTANT GUIDELINES:

**Tool Usage**:
- Use get_wizard_context() before answering questions about the user's own request
- Use start_wizard() when the user wants to START a new leave request
- Use resume_wizard() when the user wants to continue a request that is in progress

**The wizard collects the request**: Never collect leave details (dates, leave type,
manager, state) through chat. Hand off to the wizard instead.

**Accuracy**: Never invent answers the user gave. If get_wizard_context shows no
answer, say so.

**Tone**: Be friendly, professional and concise.

**When You Don't Know**: If asked about topics outside leave (salary, benefits, etc.),
politely redirect: "I specialize in leave requests. For that question, please contact HR
directly at hr@company.com"
"""

HANDOFF_MESSAGES = {
    "init": "I'll start the leave request wizard for you now. "
    "Please follow the steps to submit your request.",
    "resume": "Let's pick up where you left off.",
}


@dataclass
class ChatReply:
    text: str
    wizard_action: str | None = None
    tools_called: tuple[str, ...] = ()


class IntakeAssistantAgent:
    """
    Conversational front end for the leave intake wizard.

    Responsibilities:
    - answer questions about the user's request from wizard state only
    - hand control to the wizard (start or resume) when asked
    - prevent memory growth of the conversation registry

    The LLM generates language only. The wizard itself is never driven from
    here: a hand-off is returned to the caller as ``ChatReply.wizard_action``.
    """

    def __init__(self):
        """Initialize the agent."""
        logger.info("Initializing IntakeAssistantAgent")

        self.model = LiteLlm(
            model=settings.litellm_model,
            api_key=settings.openai_api_key,
        )

        self.agent = Agent(
            name="leave_intake_assistant",
            model=self.model,
            description="HR assistant for employee leave of absence requests",
            instruction=AGENT_INSTRUCTION,
            tools=AGENT_TOOLS,
        )

        self.app_name = "leave_intake_assistant"
        self.runner = InMemoryRunner(agent=self.agent, app_name=self.app_name)

        # thread_id -> {"ts": last access timestamp}
        # OrderedDict used so oldest conversations can be evicted deterministically.
        self.conversations: OrderedDict[str, dict[str, Any]] = OrderedDict()

        # Track which sessions we've created in the runner's session service
        self.created_sessions: set[str] = set()

        logger.info("IntakeAssistantAgent initialized successfully")

    def _prune_sessions(self) -> None:
        """Drop conversations idle past the TTL, then the oldest ones over capacity."""
        now = time.time()

        expired = [
            tid
            for tid, meta in self.conversations.items()
            if now - meta["ts"] > settings.session_ttl_seconds
        ]
        for tid in expired:
            del self.conversations[tid]
            self.created_sessions.discard(tid)

        while len(self.conversations) > settings.max_sessions:
            oldest, _ = self.conversations.popitem(last=False)
            self.created_sessions.discard(oldest)

    async def _ensure_session_created(self, thread_id: str, user_id: str) -> None:
        """Ensure the thread exists in the runner's session service."""
        if thread_id in self.created_sessions:
            return

        # Pruning forgets the thread locally but the runner may still hold it
        existing = await self.runner.session_service.get_session(
            app_name=self.app_name, user_id=user_id, session_id=thread_id
        )
        if existing is None:
            await self.runner.session_service.create_session(
                app_name=self.app_name, user_id=user_id, session_id=thread_id
            )
            logger.info(f"Created chat session: {thread_id} for user: {user_id}")
        self.created_sessions.add(thread_id)

    async def _run_agent_async(self, message: str, thread_id: str, employee_id: str = None) -> str:
        """
        Run agent using the Google ADK Runner pattern.

        Args:
            message: User's message
            thread_id: Conversation thread identifier
            employee_id: Optional employee ID

        Returns:
            Agent's response text
        """
        user_id = employee_id or "anonymous"

        await self._ensure_session_created(thread_id, user_id)

        content = types.Content(role="user", parts=[types.Part(text=message)])

        final_response_text = None

        async for event in self.runner.run_async(
            user_id=user_id, session_id=thread_id, new_message=content
        ):
            if event.is_final_response():
                if event.content and event.content.parts:
                    final_response_text = event.content.parts[0].text
                break

        return final_response_text or ""

    async def chat(self, message: str, thread_id: str, employee_id: str = None) -> ChatReply:
        """
        Send a message to the assistant and get its reply.

        Args:
            message: User's message
            thread_id: Conversation thread, shared with the wizard
            employee_id: Optional employee ID for context

        Returns:
            ChatReply with the text and the wizard hand-off, if any
        """
        logger.info(f"Processing message for thread {thread_id}")

        self.conversations[thread_id] = {"ts": time.time(), "user_id": employee_id or "anonymous"}
        self.conversations.move_to_end(thread_id)
        self._prune_sessions()

        set_request_context(thread_id, employee_id)
        try:
            try:
                with trace_span("agent_run", thread=thread_id):
                    response_text = await self._run_agent_async(message, thread_id, employee_id)
            except Exception as e:
                logger.error(f"Error in agent.chat: {str(e)}", exc_info=True)
                return ChatReply(
                    text="I apologize, but I encountered an error processing your request. "
                    "Please try again or contact HR support if the issue persists."
                )

            action = get_wizard_action()
            tools_used = tuple(get_tools_called())

            if action:
                logger.info(f"Thread {thread_id}: assistant handed off to wizard ({action})")
                response_text = response_text or HANDOFF_MESSAGES[action]
            elif not response_text:
                response_text = "I apologize, but I couldn't generate a response."

            return ChatReply(text=response_text, wizard_action=action, tools_called=tools_used)

        finally:
            clear_request_context()

    async def reset_conversation(self, thread_id: str):
        """Reset conversation history for a thread."""
        meta = self.conversations.pop(thread_id, None)
        if thread_id in self.created_sessions:
            self.created_sessions.discard(thread_id)
            await self.runner.session_service.delete_session(
                app_name=self.app_name,
                user_id=(meta or {}).get("user_id", "anonymous"),
                session_id=thread_id,
            )
        logger.info(f"Conversation reset for thread {thread_id}")


# Global agent instance
intake_agent = None


def get_agent() -> IntakeAssistantAgent:
    """Get or create global agent instance."""
    global intake_agent
    if intake_agent is None:
        intake_agent = IntakeAssistantAgent()
    return intake_agent

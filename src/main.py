"""
FastAPI application serving the Leave Intake Assistant.
Provides REST API endpoints for the wizard, the chat assistant and monitoring.
"""

import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from src.agent import get_agent
from src.config import settings
from src.errors import WizardError
from src.flow import get_flow_controller
from src.payload import render_step_text
from src.schemas import StepPayload, WizardRequest, WizardSession
from src.session_store import session_store
from src.wizard_context import WizardContext

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# Pydantic models for API
class ChatRequest(BaseModel):
    """Request model for chat endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "I need to take leave for surgery next month",
                "thread_id": "thread_123",
                "employee_id": "E001",
            }
        }
    )

    message: str = Field(..., description="User's message")
    thread_id: str = Field(..., description="Conversation thread, shared with the wizard")
    employee_id: str | None = Field(None, description="Optional employee ID for context")


class ChatResponse(BaseModel):
    """Response model for chat endpoint."""

    response: str = Field(..., description="Assistant's reply")
    thread_id: str = Field(..., description="Conversation thread")
    wizard_action: str | None = Field(None, description="Hand-off performed: init or resume")
    step_payload: StepPayload | None = Field(None, description="Wizard step to present")
    step_text: str | None = Field(None, description="Markdown rendering of the step")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    environment: str
    rule_oracle_circuit_breaker: dict


def _oracle_breaker_state() -> dict:
    breaker = getattr(get_flow_controller().oracle, "circuit_breaker", None)
    return breaker.get_state() if breaker else {}


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    logger.info("Starting Leave Intake Assistant API")
    logger.info(f"Environment: {settings.environment}")

    get_flow_controller()
    try:
        get_agent()
        logger.info("Agent initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize agent: {e}")

    yield

    logger.info("Shutting down Leave Intake Assistant API")


# Create FastAPI app
app = FastAPI(
    title="Leave Intake Assistant API",
    description="Rule-driven leave request wizard with a conversational assistant",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WizardError)
async def wizard_error_handler(request: Request, exc: WizardError):
    """Map engine failures to a stable JSON error body."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc}")
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": str(exc), "retryable": exc.retryable},
    )


# API Endpoints


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {"message": "Leave Intake Assistant API", "version": "1.0.0", "docs": "/docs"}


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """
    Health check endpoint.
    Returns service status and the rule oracle's circuit breaker state.
    """
    return HealthResponse(
        status="healthy",
        environment=settings.environment,
        rule_oracle_circuit_breaker=_oracle_breaker_state(),
    )


@app.post("/wizard/{thread_id}", response_model=StepPayload, tags=["Wizard"])
async def wizard(thread_id: str, request: WizardRequest):
    """
    Drive the leave intake wizard on a thread.

    Start a request:
    ```json
    {"action": "init", "employeeId": "E001"}
    ```

    Answer the pending step (``stepId`` must be the step that was presented):
    ```json
    {
        "action": "respond",
        "stepId": "step-leave-type",
        "inputResponses": [{"questionId": "q-leave-type", "value": "medical"}]
    }
    ```

    Re-present the pending step without changing anything:
    ```json
    {"action": "resume"}
    ```

    A payload whose step id is ``complete`` means the request was submitted.
    """
    logger.info(f"Wizard request: thread={thread_id} action={request.action.value}")
    return await get_flow_controller().handle(thread_id, request)


@app.get("/wizard/{thread_id}/context", response_model=WizardContext, tags=["Wizard"])
async def wizard_context(thread_id: str):
    """Progress summary for a thread: step statuses and answers so far."""
    return get_flow_controller().context(thread_id)


@app.post("/wizard/{thread_id}/abandon", response_model=WizardSession, tags=["Wizard"])
async def abandon_wizard(thread_id: str):
    """Abandon the in-progress request on a thread."""
    return get_flow_controller().abandon(thread_id)


@app.post("/chat", response_model=ChatResponse, tags=["Chat"])
async def chat(request: ChatRequest):
    """
    Chat with the Leave Intake Assistant.

    The thread id is shared with the wizard: when the assistant decides to
    start or resume the wizard, the step to present is returned alongside
    the reply.
    """
    logger.info(f"Chat request: thread={request.thread_id}")

    try:
        agent = get_agent()
        reply = await agent.chat(
            message=request.message, thread_id=request.thread_id, employee_id=request.employee_id
        )
    except Exception as e:
        logger.error(f"Error in /chat endpoint: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred processing your request. Please try again.",
        ) from e

    payload = None
    if reply.wizard_action == "init":
        payload = get_flow_controller().init(request.thread_id, employee_id=request.employee_id)
    elif reply.wizard_action == "resume":
        payload = get_flow_controller().resume(request.thread_id)

    return ChatResponse(
        response=reply.text,
        thread_id=request.thread_id,
        wizard_action=reply.wizard_action,
        step_payload=payload,
        step_text=render_step_text(payload) if payload else None,
    )


@app.post("/reset-conversation/{thread_id}", tags=["Chat"])
async def reset_conversation(thread_id: str):
    """
    Reset chat history for a thread.
    The wizard session on the thread is left as is.
    """
    await get_agent().reset_conversation(thread_id)
    return {"message": f"Conversation reset for thread {thread_id}", "thread_id": thread_id}


@app.get("/ready")
def ready():
    return {"status": "ready"}


@app.get("/metrics", tags=["Monitoring"])
async def metrics():
    """
    Monitoring endpoint.

    Returns:
    - Rule oracle circuit breaker state
    - Stored wizard sessions
    """
    return {
        "circuit_breaker": _oracle_breaker_state(),
        "wizard_sessions": len(session_store),
        "environment": settings.environment,
    }


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8080)),
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )

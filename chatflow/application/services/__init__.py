"""Application services."""

from chatflow.application.services.send_orchestrator import (
    SendOrchestrator,
    SendState,
    SendStep,
    SubmissionOutcome,
    SubmissionResult,
)

__all__ = [
    "SendOrchestrator",
    "SendState",
    "SendStep",
    "SubmissionOutcome",
    "SubmissionResult",
]

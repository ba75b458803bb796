"""
Booking Workflow Module

Takes a traveler from search results to a submitted booking. It includes:

- The staged booking workflow (bus, passengers, seats, summary, submit)
- Fare calculation with tax and a flat service charge
- The booking ledger client (submit, history, cancel)
- Per-session workflow registry for the HTTP layer

Key Components:
- workflow.py: BookingWorkflow state machine
- fare_service.py: Fare calculation
- ledger.py: Booking ledger protocol and HTTP client
- registry.py: Session registry wiring collaborators per browser session
- router.py: FastAPI endpoints for the workflow (mounted by boardeasy.main)
- schemas.py: Pydantic models for stages, drafts, confirmations and views

Features:
- Seat count and passenger checks gate the later stages
- Submitting is blocked while a submission is in flight
- Failed submissions keep the draft for another try
"""

from .workflow import BookingWorkflow
from .fare_service import FareCalculationService, compute_total
from .ledger import BookingLedger, HttpBookingLedger, BookingSubmissionError
from .registry import WorkflowRegistry, BookingSession
from .schemas import (
    BookingStage, BookingDraft, BookingConfirmation, BookingRecord,
    FareBreakdown, TransitionResult, WorkflowView
)

__all__ = [
    "BookingWorkflow",
    "FareCalculationService",
    "compute_total",
    "BookingLedger",
    "HttpBookingLedger",
    "BookingSubmissionError",
    "WorkflowRegistry",
    "BookingSession",
    "BookingStage",
    "BookingDraft",
    "BookingConfirmation",
    "BookingRecord",
    "FareBreakdown",
    "TransitionResult",
    "WorkflowView"
]

"""
Classification and reporting of submission outcomes.

The submit collaborator either returns a ``{"success": bool, "message": str}``
shaped result or raises. Whatever happens is folded into a
SubmissionOutcome and handed to a notifier; the default notifier logs it.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from errors import ShapeValidationFailure, TransportError
from schemas import CheckStatus

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Inspection submitted successfully!"
SHAPE_MESSAGE = "Please fix the errors in the form."
TRANSPORT_FALLBACK_MESSAGE = "An unknown error occurred."
TIMEOUT_MESSAGE = "The inspection service did not respond in time."
GENERIC_MESSAGE = "An unexpected error occurred."


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    SHAPE_VALIDATION = "shape_validation"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class SubmissionOutcome(BaseModel):
    kind: OutcomeKind
    message: str
    field: Optional[str] = None
    step: Optional[int] = None
    redirect: Optional[str] = None
    summary: Optional[Dict[str, int]] = None
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


def classify_result(result: Any) -> SubmissionOutcome:
    if not isinstance(result, dict) or not isinstance(result.get("success"), bool):
        return SubmissionOutcome(kind=OutcomeKind.UNKNOWN, message=GENERIC_MESSAGE)
    if result["success"]:
        return SubmissionOutcome(
            kind=OutcomeKind.SUCCESS,
            message=result.get("message") or SUCCESS_MESSAGE,
            data=result.get("data"),
        )
    return SubmissionOutcome(
        kind=OutcomeKind.TRANSPORT,
        message=result.get("message") or TRANSPORT_FALLBACK_MESSAGE,
    )


def classify_error(exc: BaseException) -> SubmissionOutcome:
    if isinstance(exc, ShapeValidationFailure):
        return SubmissionOutcome(
            kind=OutcomeKind.SHAPE_VALIDATION,
            message=f"{SHAPE_MESSAGE} {exc}",
            field=exc.field,
            step=exc.step,
        )
    if isinstance(exc, TransportError):
        return SubmissionOutcome(kind=OutcomeKind.TRANSPORT, message=exc.message or TRANSPORT_FALLBACK_MESSAGE)
    if isinstance(exc, asyncio.TimeoutError):
        return SubmissionOutcome(kind=OutcomeKind.TRANSPORT, message=TIMEOUT_MESSAGE)
    return SubmissionOutcome(kind=OutcomeKind.UNKNOWN, message=GENERIC_MESSAGE)


def findings_summary(checklist: BaseModel) -> Dict[str, int]:
    """Count leaves of a checklist by status.

    Findings are counted per CheckStatus; facility flags as met/unmet. Free
    text and enumerated layout fields are not counted.
    """
    counts: Dict[str, int] = {}

    def visit(model: BaseModel):
        for name in type(model).model_fields:
            value = getattr(model, name)
            if isinstance(value, BaseModel):
                visit(value)
            elif isinstance(value, CheckStatus):
                counts[value.value] = counts.get(value.value, 0) + 1
            elif isinstance(value, bool):
                key = "met" if value else "unmet"
                counts[key] = counts.get(key, 0) + 1

    visit(checklist)
    return counts


def log_outcome(outcome: SubmissionOutcome):
    if outcome.kind is OutcomeKind.SUCCESS:
        logger.info(f"Submission succeeded: {outcome.message}")
    elif outcome.kind is OutcomeKind.SHAPE_VALIDATION:
        logger.warning(f"Submission rejected locally: {outcome.message} (step {outcome.step})")
    else:
        logger.error(f"Submission failed ({outcome.kind.value}): {outcome.message}")


def report(outcome: SubmissionOutcome, notifier: Callable[[SubmissionOutcome], None] = None) -> SubmissionOutcome:
    (notifier or log_outcome)(outcome)
    return outcome

"""
Multi-step capture wizard for inspection checklists.

One InspectionWizard drives any of the flavors in ``flavors``. It owns the
in-progress session exclusively: updates and navigation are synchronous,
``submit`` is the only coroutine. Navigation never checks completeness; any
step can be left unfinished and revisited.
"""

import asyncio
import functools
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from assembler import assemble
from errors import StepOutOfRange, SubmissionInProgress, WizardClosed
from flavors import Step, WizardFlavor
from reporting import OutcomeKind, SubmissionOutcome, classify_error, classify_result, findings_summary, report
from store import Target, apply_to_session, resolve

logger = logging.getLogger(__name__)

Submitter = Callable[[Dict[str, Any]], Awaitable[Any]]


class InspectionWizard:
    def __init__(
        self,
        flavor: WizardFlavor,
        submitter: Submitter,
        timeout: Optional[float] = None,
        notifier: Callable[[SubmissionOutcome], None] = None,
    ):
        self.flavor = flavor
        self.submitter = submitter
        self.timeout = timeout
        self.notifier = notifier
        self.session = flavor.session_cls()
        self.step = 1
        self.submitting = False
        self.completed = False
        self.last_outcome: Optional[SubmissionOutcome] = None
        self.last_active = time.monotonic()

    def touch(self):
        self.last_active = time.monotonic()

    def idle_for(self, now: float = None) -> float:
        return (now if now is not None else time.monotonic()) - self.last_active

    @property
    def total_steps(self) -> int:
        return self.flavor.total_steps

    @property
    def current_step(self) -> Step:
        return self.flavor.steps[self.step - 1]

    @property
    def is_final_step(self) -> bool:
        return self.step == self.total_steps

    def _require_session(self):
        if self.session is None:
            raise WizardClosed()

    def _require_idle(self):
        """Session and step are frozen while a submission is in flight."""
        self._require_session()
        if self.submitting:
            raise SubmissionInProgress()

    def update(self, path: str, value: Any):
        self._require_idle()
        self.session = apply_to_session(self.session, path, value)
        return self.session

    def next(self) -> int:
        self._require_idle()
        if self.step >= self.total_steps:
            raise StepOutOfRange(self.step, self.total_steps, "advance")
        self.step += 1
        return self.step

    def previous(self) -> int:
        self._require_idle()
        if self.step <= 1:
            raise StepOutOfRange(self.step, self.total_steps, "go back")
        self.step -= 1
        return self.step

    def discard(self):
        if self.submitting:
            raise SubmissionInProgress()
        if self.session is not None:
            logger.info(f"{self.flavor.name} wizard discarded at step {self.step}")
        self.session = None

    def step_view(self) -> Dict[str, Any]:
        """The current step and the slice of the session its form edits."""
        self._require_session()
        step = self.current_step
        dumped = self.session.model_dump(mode="json")
        data = {}
        for name in step.fields:
            if resolve(self.flavor.session_cls, name).target is Target.IDENTITY:
                data[name] = dumped[name]
            else:
                data[name] = dumped["checklist"][name]
        return {
            "step": self.step,
            "totalSteps": self.total_steps,
            "key": step.key,
            "title": step.title,
            "data": data,
        }

    async def submit(self) -> SubmissionOutcome:
        """Assemble the session and hand it to the submitter.

        The submitter call is shielded: when the timeout fires or the caller
        is cancelled, the call keeps running and ``submitting`` stays set
        until it settles. A late success still completes the wizard, so a
        timed-out document is never stored twice through a retry.
        """
        self._require_idle()
        if not self.is_final_step:
            raise StepOutOfRange(self.step, self.total_steps, "submit")

        session = self.session
        pending = None
        self.submitting = True
        try:
            payload = assemble(session, self.flavor)
            pending = asyncio.ensure_future(self.submitter(payload))
            result = await asyncio.wait_for(asyncio.shield(pending), self.timeout)
        except Exception as e:
            logger.debug(f"{self.flavor.name} submit raised {type(e).__name__}", exc_info=True)
            outcome = classify_error(e)
        else:
            outcome = classify_result(result)
        finally:
            if pending is not None and not pending.done():
                logger.warning(f"{self.flavor.name} submit still running, holding the session until it settles")
                pending.add_done_callback(functools.partial(self._settle_late, session))
            else:
                self.submitting = False

        return self._conclude(outcome, session)

    def _settle_late(self, session, pending: asyncio.Future):
        self.submitting = False
        if pending.cancelled():
            return
        exc = pending.exception()
        outcome = classify_error(exc) if exc is not None else classify_result(pending.result())
        self._conclude(outcome, session)

    def _conclude(self, outcome: SubmissionOutcome, session) -> SubmissionOutcome:
        if outcome.kind is OutcomeKind.SUCCESS:
            outcome.redirect = self.flavor.redirect
            outcome.summary = findings_summary(session.checklist)
            self.session = None
            self.completed = True
        elif outcome.kind is OutcomeKind.SHAPE_VALIDATION:
            self.step = outcome.step

        self.last_outcome = outcome
        return report(outcome, self.notifier)

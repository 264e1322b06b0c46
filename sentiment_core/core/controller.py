"""
Submission lifecycle for the sentiment client.

The module-level functions are pure transitions over SessionState; the
RequestController holds the current state and the history cache and
wires the transitions around the one network call of a submission:

    Idle -> Validating -> (Idle with validation error)
                       -> InFlight -> Idle (success / transport failure / rejection)
"""

import logging
from dataclasses import replace
from typing import Dict, Any, List, Optional, Tuple

from ..errors import TransportError, MalformedResponseError
from ..models import (
    AnalysisRequest, AnalysisResult, HistoryEntry, SessionState, ModelName,
    Success, ValidationFailure, TransportFailure, ServiceRejection, Outcome,
    MAX_TEXT_LENGTH, VALIDATION_MESSAGE, EXAMPLE_TEXTS,
)
from .history import HistoryCache


logger = logging.getLogger(__name__)


def set_text(state: SessionState, text: str) -> SessionState:
    # Longer input is cut to MAX_TEXT_LENGTH, not rejected
    return replace(state, input_text=(text or '')[:MAX_TEXT_LENGTH])


def set_model(state: SessionState, model: str) -> SessionState:
    return replace(state, selected_model=ModelName.validate(model))


def clear(state: SessionState) -> SessionState:
    """Reset input, result and error. Leaves is_submitting and history alone."""
    return replace(state, input_text='', current_result=None, error_message='')


def begin_submission(state: SessionState) -> Tuple[SessionState, Optional[AnalysisRequest]]:
    """
    Validate the input and, if it is usable, move to InFlight.

    Returns:
        (new_state, request) where request is None when validation failed
        and no network call must be made
    """
    if not state.input_text.strip():
        return replace(state, error_message=VALIDATION_MESSAGE), None

    request = AnalysisRequest(text=state.input_text, model=state.selected_model)
    new_state = replace(
        state,
        error_message='',
        current_result=None,
        is_submitting=True,
        submission_seq=state.submission_seq + 1,
    )
    return new_state, request


def interpret_response(body: Dict[str, Any]) -> Outcome:
    """Map a decoded response body to Success, TransportFailure or ServiceRejection"""
    if body.get('success') is True:
        # A success flag with missing or unusable data is a malformed response
        try:
            return Success(AnalysisResult.from_payload(body.get('data')))
        except MalformedResponseError as e:
            return TransportFailure(reason=str(e))
    return ServiceRejection(payload=body)


def resolve_submission(state: SessionState, seq: int, outcome: Outcome,
                       report_rejections: bool = False) -> SessionState:
    """
    Apply the outcome of submission number ``seq``.

    A resolution for anything but the latest submission is stale and
    leaves the state untouched.
    """
    if seq != state.submission_seq:
        return state

    if isinstance(outcome, Success):
        return replace(state, current_result=outcome.result, is_submitting=False)

    if isinstance(outcome, TransportFailure):
        return replace(state, current_result=None, error_message=outcome.message,
                       is_submitting=False)

    if isinstance(outcome, ServiceRejection) and report_rejections:
        return replace(state, error_message=outcome.message, is_submitting=False)

    return replace(state, is_submitting=False)


class RequestController:
    """
    Turns one user submission into exactly one call to the service.

    This is the object a view talks to. It exposes read-only state for
    rendering and four commands: set_text(), set_model(), submit() and
    clear(). The view is expected to keep the submit trigger disabled
    while is_submitting is true (see can_submit); the controller itself
    does not refuse overlapping calls, it only ignores the older result.

    Example:
        async with PredictTransport('http://localhost:8000') as transport:
            controller = RequestController(transport)
            controller.set_text("Great film!")
            outcome = await controller.submit()
            if controller.current_result:
                print(controller.current_result.label)

    Args:
        transport: Object with ``async predict(AnalysisRequest) -> dict``,
            normally a PredictTransport
        history: Cache to append successes to (a new one if omitted)
        default_model: Initial model selection
        report_rejections: Show an error when the service answers
            ``success: false`` instead of ignoring it
    """

    def __init__(self, transport, history: Optional[HistoryCache] = None,
                 default_model: str = ModelName.DEFAULT, report_rejections: bool = False):
        self.transport = transport
        self.history_cache = history if history is not None else HistoryCache()
        self.report_rejections = report_rejections
        self._state = SessionState(selected_model=ModelName.validate(default_model))

    # Read-only view state

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def input_text(self) -> str:
        return self._state.input_text

    @property
    def selected_model(self) -> str:
        return self._state.selected_model

    @property
    def current_result(self) -> Optional[AnalysisResult]:
        return self._state.current_result

    @property
    def error_message(self) -> str:
        return self._state.error_message

    @property
    def is_submitting(self) -> bool:
        return self._state.is_submitting

    @property
    def history(self) -> List[HistoryEntry]:
        return self.history_cache.entries

    @property
    def char_count(self) -> int:
        return len(self._state.input_text)

    @property
    def char_counter(self) -> str:
        return f"{self.char_count}/{MAX_TEXT_LENGTH} characters"

    @property
    def can_submit(self) -> bool:
        return not self._state.is_submitting and bool(self._state.input_text.strip())

    # Commands

    def set_text(self, text: str):
        self._state = set_text(self._state, text)

    def set_model(self, model: str):
        self._state = set_model(self._state, model)

    def load_example(self, index: int):
        """Put EXAMPLE_TEXTS[index] (0-based) into the input"""
        self.set_text(EXAMPLE_TEXTS[index])

    def clear(self):
        self._state = clear(self._state)

    async def submit(self) -> Outcome:
        """
        Run one submission to completion.

        Never raises for service problems: the returned outcome says what
        happened and the state has already been updated accordingly.
        """
        self._state, request = begin_submission(self._state)
        if request is None:
            return ValidationFailure()

        seq = self._state.submission_seq
        logger.debug("Submission %d started: model=%s chars=%d", seq, request.model, len(request.text))

        try:
            outcome = await self._dispatch(request)
        except BaseException:
            # Cancelled or interrupted: still leave InFlight
            if seq == self._state.submission_seq:
                self._state = replace(self._state, is_submitting=False)
            raise

        if seq != self._state.submission_seq:
            logger.debug("Submission %d resolved after %d started; dropped",
                         seq, self._state.submission_seq)
            return outcome

        self._state = resolve_submission(self._state, seq, outcome, self.report_rejections)
        if isinstance(outcome, Success):
            self.history_cache.append(HistoryEntry.from_result(
                self.history_cache.next_id(), request.text, outcome.result))
        return outcome

    async def _dispatch(self, request: AnalysisRequest) -> Outcome:
        try:
            body = await self.transport.predict(request)
        except TransportError as e:
            logger.warning("Transport failure: %s", e)
            return TransportFailure(reason=str(e))
        except Exception as e:
            logger.warning("Unexpected transport error: %s: %s", type(e).__name__, e)
            return TransportFailure(reason=f"{type(e).__name__}: {e}")

        try:
            outcome = interpret_response(body)
        except Exception as e:
            logger.warning("Could not interpret response: %s: %s", type(e).__name__, e)
            return TransportFailure(reason=f"{type(e).__name__}: {e}")
        if isinstance(outcome, TransportFailure):
            logger.warning("Malformed success response: %s", outcome.reason)
        elif isinstance(outcome, ServiceRejection):
            logger.info("Service rejected request: %s", outcome.payload)
        return outcome

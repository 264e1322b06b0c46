"""Data models for the sentiment client."""

import math
import numbers
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional, Union

from ..errors import MalformedResponseError


MAX_TEXT_LENGTH = 1000
PREVIEW_LENGTH = 50
ELLIPSIS = '...'

VALIDATION_MESSAGE = "Please enter some text to analyze"
TRANSPORT_MESSAGE = "Failed to analyze sentiment. Make sure the backend is running."
REJECTION_MESSAGE = "The sentiment service could not analyze this text."

LABELS = ('Positive', 'Negative')

EXAMPLE_TEXTS = (
    "This movie was absolutely amazing! I loved every minute of it.",
    "Terrible experience. Would not recommend to anyone.",
    "It was okay, nothing special but not bad either.",
)


class ModelName:
    """Model variants the service can run"""
    RNN = 'rnn'
    LSTM = 'lstm'

    ALL = (RNN, LSTM)
    DEFAULT = LSTM
    DISPLAY = {RNN: 'RNN', LSTM: 'LSTM'}

    @classmethod
    def validate(cls, value: str) -> str:
        """Return the normalized model name or raise ValueError"""
        name = (value or '').strip().lower()
        if name not in cls.ALL:
            raise ValueError(f"Unknown model: {value!r}. Choose one of {', '.join(cls.ALL)}")
        return name


@dataclass(frozen=True)
class AnalysisRequest:
    """
    One submission to the service.

    Construction fails with ValueError if the trimmed text is empty, the
    text is longer than 1000 characters, or the model is unknown, so a
    request that exists is always safe to send.

    Example:
        request = AnalysisRequest(text="Great film!", model='lstm')
        request.to_payload()  # {'text': 'Great film!', 'model': 'lstm'}
    """
    text: str
    model: str = ModelName.DEFAULT

    def __post_init__(self):
        if not self.text or not self.text.strip():
            raise ValueError("text must contain non-whitespace characters")
        if len(self.text) > MAX_TEXT_LENGTH:
            raise ValueError(f"text exceeds {MAX_TEXT_LENGTH} characters")
        object.__setattr__(self, 'model', ModelName.validate(self.model))

    def to_payload(self) -> Dict[str, str]:
        return {'text': self.text, 'model': self.model}


@dataclass(frozen=True)
class ResultMeta:
    """Service-side details of a prediction"""
    model: str
    time_ms: int


@dataclass(frozen=True)
class AnalysisResult:
    """
    A successful prediction.

    Attributes:
        label: 'Positive' or 'Negative'
        confidence: Probability of the label, 0.0-1.0
        meta: Model the service actually used and its processing time
    """
    label: str
    confidence: float
    meta: ResultMeta

    @classmethod
    def from_payload(cls, data: Any) -> 'AnalysisResult':
        """
        Build a result from the ``data`` member of a success response.

        Raises:
            MalformedResponseError: If a field is missing or out of range
        """
        if not isinstance(data, dict):
            raise MalformedResponseError("'data' is not an object")

        label = data.get('label')
        if label not in LABELS:
            raise MalformedResponseError(f"unexpected label: {label!r}")

        confidence = data.get('confidence')
        if not _is_number(confidence) or not 0.0 <= confidence <= 1.0:
            raise MalformedResponseError(f"confidence out of range: {confidence!r}")

        meta = data.get('meta')
        if not isinstance(meta, dict):
            raise MalformedResponseError("'meta' is missing")
        model = meta.get('model')
        if not isinstance(model, str):
            raise MalformedResponseError(f"unexpected meta.model: {model!r}")
        time_ms = meta.get('time_ms')
        if not _is_number(time_ms) or time_ms < 0:
            raise MalformedResponseError(f"unexpected meta.time_ms: {time_ms!r}")

        return cls(
            label=label,
            confidence=float(confidence),
            meta=ResultMeta(model=model, time_ms=int(round(time_ms))),
        )


def _is_number(value: Any) -> bool:
    # json.loads accepts NaN and Infinity
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def make_preview(text: str) -> str:
    """First 50 characters of text, with '...' appended if anything was cut"""
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + ELLIPSIS
    return text


@dataclass(frozen=True)
class HistoryEntry:
    """Display summary of one past successful analysis"""
    id: int
    text_preview: str
    label: str
    confidence: float
    model: str
    time_ms: int
    submitted_at: str

    @classmethod
    def from_result(cls, entry_id: int, text: str, result: AnalysisResult,
                    completed_at: Optional[datetime] = None) -> 'HistoryEntry':
        completed_at = completed_at or datetime.now()
        return cls(
            id=entry_id,
            text_preview=make_preview(text),
            label=result.label,
            confidence=result.confidence,
            model=result.meta.model,
            time_ms=result.meta.time_ms,
            submitted_at=completed_at.strftime('%H:%M:%S'),
        )


@dataclass(frozen=True)
class SessionState:
    """
    Everything the view renders, apart from history.

    Transitions never mutate a state; they return a new one (see
    sentiment_core.core.controller).
    """
    input_text: str = ''
    selected_model: str = ModelName.DEFAULT
    current_result: Optional[AnalysisResult] = None
    error_message: str = ''
    is_submitting: bool = False
    submission_seq: int = 0


# Outcomes of a submission. Exactly one is produced per submit() call.

@dataclass(frozen=True)
class Success:
    result: AnalysisResult


@dataclass(frozen=True)
class ValidationFailure:
    message: str = VALIDATION_MESSAGE


@dataclass(frozen=True)
class TransportFailure:
    reason: str
    message: str = TRANSPORT_MESSAGE


@dataclass(frozen=True)
class ServiceRejection:
    """The service answered but did not report success"""
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        for key in ('error', 'message'):
            value = self.payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return REJECTION_MESSAGE


Outcome = Union[Success, ValidationFailure, TransportFailure, ServiceRejection]


__all__ = [
    'MAX_TEXT_LENGTH', 'PREVIEW_LENGTH', 'ELLIPSIS', 'LABELS', 'EXAMPLE_TEXTS',
    'VALIDATION_MESSAGE', 'TRANSPORT_MESSAGE', 'REJECTION_MESSAGE',
    'ModelName', 'AnalysisRequest', 'ResultMeta', 'AnalysisResult',
    'HistoryEntry', 'SessionState', 'make_preview',
    'Success', 'ValidationFailure', 'TransportFailure', 'ServiceRejection', 'Outcome',
]

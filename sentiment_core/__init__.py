"""Sentiment Client - request/response orchestration for a remote sentiment service."""

__version__ = "1.0.0"

from .models import AnalysisRequest, AnalysisResult, ResultMeta, HistoryEntry, SessionState, ModelName
from .core.history import HistoryCache
from .core.transport import PredictTransport
from .core.controller import RequestController
from .errors import SentimentClientError, ConfigError, TransportError, MalformedResponseError

__all__ = [
    'AnalysisRequest', 'AnalysisResult', 'ResultMeta', 'HistoryEntry', 'SessionState', 'ModelName',
    'HistoryCache', 'PredictTransport', 'RequestController',
    'SentimentClientError', 'ConfigError', 'TransportError', 'MalformedResponseError',
]

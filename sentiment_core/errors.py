"""Exception types raised by the sentiment client."""

from typing import Optional


class SentimentClientError(Exception):
    """Base class for every error raised by this package"""


class ConfigError(SentimentClientError, ValueError):
    """Invalid configuration value (environment, .env file or CLI flag)"""


class TransportError(SentimentClientError):
    """
    No structurally valid response could be obtained from the service.

    Covers connection failures, timeouts, non-JSON bodies and error
    statuses that carry no ``success`` flag. The message is diagnostic
    only; users are shown a fixed generic message instead.

    Attributes:
        status: HTTP status code when a response was received, else None
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class MalformedResponseError(TransportError):
    """The body was received but is not the shape the client expects"""


__all__ = ['SentimentClientError', 'ConfigError', 'TransportError', 'MalformedResponseError']

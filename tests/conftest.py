"""Shared fixtures for the sentiment client tests."""

import os
import sys

import pytest

# Add parent directory to path so we can import sentiment_client and sentiment_core
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sentiment_core.errors import TransportError


def success_body(label='Positive', confidence=0.92, model='lstm', time_ms=15):
    """A success response as the service sends it"""
    return {
        'success': True,
        'data': {
            'label': label,
            'confidence': confidence,
            'meta': {'model': model, 'time_ms': time_ms},
        },
    }


class FakeTransport:
    """
    Stands in for PredictTransport.

    Each queued response is either a dict (returned as the body) or an
    exception instance (raised). Requests are recorded in ``calls``.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def predict(self, request):
        self.calls.append(request)
        response = self.responses.pop(0) if self.responses else success_body()
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def unreachable():
    return TransportError("ClientConnectorError: Cannot connect to host localhost:8000")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's real SENTIMENT_* settings out of the tests"""
    for key in list(os.environ):
        if key.startswith('SENTIMENT_') or key == 'DEBUG_SENTIMENT':
            monkeypatch.delenv(key, raising=False)

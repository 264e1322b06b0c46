"""aiohttp client for the sentiment prediction endpoint."""

import asyncio
import json
import logging
import os
from typing import Dict, Any, Optional

import aiohttp

from ..errors import TransportError, MalformedResponseError
from ..models import AnalysisRequest


logger = logging.getLogger(__name__)

PREDICT_PATH = '/api/predict'
DEFAULT_API_URL = 'http://localhost:8000'


class PredictTransport:
    """
    Sends AnalysisRequests to ``<api_url>/api/predict``.

    One attempt per call, no retries. The returned value is the decoded
    JSON body; deciding whether it means success is left to the caller.
    Every way of not getting such a body is raised as TransportError.

    The aiohttp session is created on first use and reused until close().
    Use it as an async context manager to have that done for you:

        async with PredictTransport('http://localhost:8000') as transport:
            body = await transport.predict(AnalysisRequest("Great film!"))

    Args:
        api_url: Service base URL (defaults to env var SENTIMENT_API_URL)
        timeout: Total seconds per request; None keeps aiohttp's default
        session: Optional externally owned session (not closed by close())
    """

    def __init__(self, api_url: str = None, timeout: Optional[float] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        self.api_url = (api_url or os.environ.get('SENTIMENT_API_URL') or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def predict_url(self) -> str:
        return f"{self.api_url}{PREDICT_PATH}"

    async def __aenter__(self) -> 'PredictTransport':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def predict(self, request: AnalysisRequest) -> Dict[str, Any]:
        """
        POST one request and return the decoded JSON object.

        The body is decoded whatever the status code. An error status is
        only passed through when its body still carries a boolean
        ``success`` flag.

        Raises:
            TransportError: Connection failure, timeout or error status
                without a success flag
            MalformedResponseError: Body is not a JSON object
        """
        headers = {'Content-Type': 'application/json'}
        kwargs = {}
        if self.timeout is not None:
            kwargs['timeout'] = aiohttp.ClientTimeout(total=self.timeout)

        logger.debug("POST %s model=%s chars=%d", self.predict_url, request.model, len(request.text))

        try:
            async with self._get_session().post(
                self.predict_url,
                headers=headers,
                json=request.to_payload(),
                **kwargs
            ) as response:
                status = response.status
                raw = await response.read()
        except asyncio.TimeoutError as e:
            limit = f" after {self.timeout}s" if self.timeout is not None else ""
            raise TransportError(f"Request timed out{limit}") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        try:
            body = json.loads(raw.decode('utf-8'))
        except ValueError as e:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors
            if status >= 400:
                raise TransportError(f"HTTP {status} with non-JSON body", status=status) from e
            raise MalformedResponseError(f"Response is not JSON: {raw[:100]!r}", status=status) from e

        if not isinstance(body, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(body).__name__}", status=status)

        if status >= 300 and not isinstance(body.get('success'), bool):
            raise TransportError(f"HTTP {status} without success flag", status=status)

        return body

"""HTTP transport for the relationship extraction service.

Transports submit a :class:`~relext.config.ServiceRequest` and hand back the
response body as a stream of byte chunks, so the section parser can start
work before the whole document has arrived.

A non-200 answer raises :class:`~relext.errors.ProtocolError` before any body
bytes are produced. Network failures are left as the ``httpx.HTTPError``
raised by httpx.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncGenerator, Generator

import httpx

from relext.config import ServiceRequest
from relext.errors import ProtocolError
from relext.logging import setup_logging

logger = setup_logging()

DEFAULT_TIMEOUT = 60.0


def _check_status(response: httpx.Response) -> None:
    if response.status_code != httpx.codes.OK:
        reason = response.reason_phrase or httpx.codes.get_reason_phrase(response.status_code)
        logger.warning(f"Extraction request to {response.request.url} failed with {response.status_code} {reason}")
        raise ProtocolError(response.status_code, reason)


class TransportInterface(ABC):
    """Submit an extraction request and stream back the response body."""

    @abstractmethod
    def stream(self, request: ServiceRequest) -> Generator[bytes, None, None]:
        """Yield the response body in chunks.

        Raises:
            ProtocolError: If the service answers with a non-success status.
        """


class AsyncTransportInterface(ABC):
    """Async counterpart of :class:`TransportInterface`."""

    @abstractmethod
    def stream(self, request: ServiceRequest) -> AsyncGenerator[bytes, None]:
        """Yield the response body in chunks.

        Raises:
            ProtocolError: If the service answers with a non-success status.
        """


class HttpxTransport(TransportInterface):
    """Blocking transport built on ``httpx.Client``.

    A client passed in is left open for the caller to manage. Without one,
    a client is created per request and closed when the stream ends.
    """

    def __init__(self, client: httpx.Client | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.client = client
        self.timeout = timeout

    def stream(self, request: ServiceRequest) -> Generator[bytes, None, None]:
        if self.client is not None:
            yield from self._stream(self.client, request)
            return
        with httpx.Client(timeout=self.timeout) as client:
            yield from self._stream(client, request)

    @staticmethod
    def _stream(client: httpx.Client, request: ServiceRequest) -> Generator[bytes, None, None]:
        with client.stream(
            request.method,
            request.url,
            headers=request.headers,
            data=request.form,
            auth=(request.user, request.password),
        ) as response:
            _check_status(response)
            yield from response.iter_bytes()


class AsyncHttpxTransport(AsyncTransportInterface):
    """Async transport built on ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.client = client
        self.timeout = timeout

    async def stream(self, request: ServiceRequest) -> AsyncGenerator[bytes, None]:
        if self.client is not None:
            async for chunk in self._stream(self.client, request):
                yield chunk
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            async for chunk in self._stream(client, request):
                yield chunk

    @staticmethod
    async def _stream(client: httpx.AsyncClient, request: ServiceRequest) -> AsyncGenerator[bytes, None]:
        async with client.stream(
            request.method,
            request.url,
            headers=request.headers,
            data=request.form,
            auth=(request.user, request.password),
        ) as response:
            _check_status(response)
            async for chunk in response.aiter_bytes():
                yield chunk

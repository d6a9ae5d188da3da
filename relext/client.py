"""Public entry points for the relationship extraction client.

Usage:
    ```python
    from relext import extract

    def done(err, result):
        if err:
            print("failed:", err)
        else:
            print(result.to_dict())

    extract("John Smith works for IBM.", {"includeRelationships": True, "api": creds}, done)
    ```

``extract(text, callback)`` uses the default options. Only a malformed call
raises; every other failure (missing credentials, network errors, HTTP
errors, bad documents) is passed to the callback, which is called exactly
once.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import aclosing, closing
from typing import Any

import httpx

from relext.assembler import Callback, ResponseAssembler
from relext.config import ExtractionOptions, build_request, load_options
from relext.errors import ConfigurationError, ExtractionError, UsageError
from relext.parser import SectionStreamParser
from relext.transport import (
    AsyncHttpxTransport,
    AsyncTransportInterface,
    HttpxTransport,
    TransportInterface,
)

USAGE = "Incorrect arguments. Usage: extract(<text to parse>, [options], callback)"

# failures that are reported through the callback rather than raised
DELIVERED_ERRORS = (ExtractionError, httpx.HTTPError, OSError)


def parse_arguments(text: Any, args: tuple[Any, ...]) -> tuple[ExtractionOptions | Mapping[str, Any] | None, Callback]:
    """Validate the call shape ``(text, [options], callback)``.

    Options may be an ExtractionOptions or a mapping and are returned
    unvalidated; their values are checked by :func:`load_options` once the
    callback is known, so a bad value is delivered rather than raised.

    Raises:
        UsageError: If the arguments do not fit that shape.
    """
    if len(args) not in (1, 2):
        raise UsageError(USAGE)
    if not text:
        raise UsageError("text is required")
    if not isinstance(text, str):
        raise UsageError("First parameter is required and should be the text to parse")

    if len(args) == 1:
        callback = args[0]
        if not callable(callback):
            raise UsageError(USAGE)
        return None, callback

    options, callback = args
    if not callable(callback):
        raise UsageError(USAGE)
    if not isinstance(options, (ExtractionOptions, Mapping)):
        raise UsageError(USAGE)
    return options, callback


def _start(text: Any, args: tuple[Any, ...]) -> ResponseAssembler | None:
    """Check the call and set up its assembler, or deliver an options error."""
    options, callback = parse_arguments(text, args)
    try:
        return ResponseAssembler(load_options(options), callback)
    except ConfigurationError as err:
        callback(err, None)
        return None


class ExtractionClient:
    """Blocking client. ``extract`` returns once the callback has run."""

    def __init__(
        self,
        transport: TransportInterface | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.transport = transport or HttpxTransport()
        self.environ = environ

    def extract(self, text: str, *args: Any) -> None:
        """Submit ``text`` and deliver the restructured response to the callback."""
        assembler = _start(text, args)
        if assembler is None:
            return

        try:
            request = build_request(text, assembler.options, self.environ)
            parser = SectionStreamParser()
            with closing(self.transport.stream(request)) as chunks:
                for chunk in chunks:
                    for name, obj in parser.feed(chunk):
                        assembler.on_section(name, obj)
            for name, obj in parser.close():
                assembler.on_section(name, obj)
        except DELIVERED_ERRORS as err:
            assembler.fail(err)
            return

        assembler.on_end()


class AsyncExtractionClient:
    """Async client with the same calling convention as ExtractionClient."""

    def __init__(
        self,
        transport: AsyncTransportInterface | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.transport = transport or AsyncHttpxTransport()
        self.environ = environ

    async def extract(self, text: str, *args: Any) -> None:
        assembler = _start(text, args)
        if assembler is None:
            return

        try:
            request = build_request(text, assembler.options, self.environ)
            parser = SectionStreamParser()
            async with aclosing(self.transport.stream(request)) as chunks:
                async for chunk in chunks:
                    for name, obj in parser.feed(chunk):
                        assembler.on_section(name, obj)
            for name, obj in parser.close():
                assembler.on_section(name, obj)
        except DELIVERED_ERRORS as err:
            assembler.fail(err)
            return

        assembler.on_end()


def extract(text: str, *args: Any) -> None:
    """``extract(text, [options], callback)`` using the default httpx transport."""
    ExtractionClient().extract(text, *args)


async def aextract(text: str, *args: Any) -> None:
    """Async form of :func:`extract`."""
    await AsyncExtractionClient().extract(text, *args)

"""Test fixtures: a sample service response and mock HTTP plumbing.

This module provides:
- SAMPLE_XML, the service response for the sentence in SAMPLE_TEXT, in the
  shape the Relationship Extraction service returns it (text, sentence
  parse, then the mentions, entities and relations sections)
- CallbackRecorder, a completion callback that records every call
- Fixtures building sync and async clients on top of httpx.MockTransport,
  so no test touches the network
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from relext.client import AsyncExtractionClient, ExtractionClient
from relext.transport import AsyncHttpxTransport, HttpxTransport

SAMPLE_TEXT = (
    "John Smith works for IBM. "
    "He started in 2004. "
    "John lives in the UK, in a town called Winchester. "
    "John used to go to University in Bath."
)

SERVICE_URL = "https://relext.example.com/api"

CREDENTIALS = {"url": SERVICE_URL, "user": "someone", "pass": "secret"}

SAMPLE_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rep sts="OK">
<doc id="">
<text>John Smith works for IBM. He started in 2004. John lives in the UK, in a town called Winchester. John used to go to University in Bath.</text>
<sents>
<sent sid="0" begin="0" end="24">
<str>John Smith works for IBM.</str>
<tokens>
<tok tid="0" begin="0" end="3">John</tok>
<tok tid="1" begin="5" end="9">Smith</tok>
</tokens>
<parse score="1.0">[S [NP John Smith NP] [VP works [PP for [NP IBM NP] PP] VP] . S]</parse>
<dependency_parse>0 1 nn, 1 2 nsubj, 2 -1 root</dependency_parse>
<usd_dependency_parse>0 1 compound, 1 2 nsubj</usd_dependency_parse>
</sent>
</sents>
<mentions>
<mention mid="-M0" mtype="NAM" begin="0" end="9" head-begin="0" head-end="9" eid="-E0" etype="PERSON" role="PERSON" metonymy="0" class="SPC" score="0.995296" corefScore="1.0">John Smith</mention>
<mention mid="-M1" mtype="NAM" begin="21" end="23" head-begin="21" head-end="23" eid="-E1" etype="ORGANIZATION" role="ORGANIZATION" metonymy="0" class="SPC" score="0.973326" corefScore="1.0">IBM</mention>
<mention mid="-M2" mtype="PRO" begin="26" end="27" head-begin="26" head-end="27" eid="-E0" etype="PERSON" role="PERSON" metonymy="0" class="SPC" score="0.996168" corefScore="0.628118">He</mention>
<mention mid="-M3" mtype="NONE" begin="40" end="43" head-begin="40" head-end="43" eid="-E6" etype="DATE" role="DATE" metonymy="0" class="SPC" score="0.828233" corefScore="1.0">2004</mention>
<mention mid="-M4" mtype="NAM" begin="46" end="49" head-begin="46" head-end="49" eid="-E0" etype="PERSON" role="PERSON" metonymy="0" class="SPC" score="0.999208" corefScore="0.990678">John</mention>
<mention mid="-M5" mtype="NAM" begin="64" end="65" head-begin="64" head-end="65" eid="-E2" etype="GPE" role="LOCATION" metonymy="0" class="SPC" score="0.555308" corefScore="1.0">UK</mention>
<mention mid="-M6" mtype="NOM" begin="73" end="76" head-begin="73" head-end="76" eid="-E3" etype="GPE" role="LOCATION" metonymy="0" class="SPC" score="0.941741" corefScore="0.87834">town</mention>
<mention mid="-M7" mtype="NAM" begin="85" end="94" head-begin="85" head-end="94" eid="-E3" etype="GPE" role="LOCATION" metonymy="0" class="SPC" score="0.380848" corefScore="1.0">Winchester</mention>
<mention mid="-M8" mtype="NAM" begin="97" end="100" head-begin="97" head-end="100" eid="-E0" etype="PERSON" role="PERSON" metonymy="0" class="SPC" score="0.999518" corefScore="0.996437">John</mention>
<mention mid="-M9" mtype="NAM" begin="116" end="125" head-begin="116" head-end="125" eid="-E4" etype="ORGANIZATION" role="ORGANIZATION" metonymy="0" class="SPC" score="0.38299" corefScore="1.0">University</mention>
<mention mid="-M10" mtype="NAM" begin="130" end="133" head-begin="130" head-end="133" eid="-E5" etype="GPE" role="LOCATION" metonymy="0" class="SPC" score="0.988661" corefScore="0.297996">Bath</mention>
</mentions>
<entities>
<entity eid="-E0" type="PERSON" generic="0" class="SPC" level="NAM" subtype="OTHER" score="0.887372">
<mentref mid="-M0">John Smith</mentref>
<mentref mid="-M4">John</mentref>
<mentref mid="-M8">John</mentref>
<mentref mid="-M2">He</mentref>
</entity>
<entity eid="-E1" type="ORGANIZATION" generic="0" class="SPC" level="NAM" subtype="COMMERCIAL" score="1.0">
<mentref mid="-M1">IBM</mentref>
</entity>
<entity eid="-E2" type="GPE" generic="0" class="SPC" level="NAM" subtype="AREA" score="1.0">
<mentref mid="-M5">UK</mentref>
</entity>
<entity eid="-E3" type="GPE" generic="0" class="SPC" level="NAM" subtype="OTHER" score="0.937198">
<mentref mid="-M7">Winchester</mentref>
<mentref mid="-M6">town</mentref>
</entity>
<entity eid="-E4" type="ORGANIZATION" generic="0" class="SPC" level="NAM" subtype="EDUCATIONAL" score="1.0">
<mentref mid="-M9">University</mentref>
</entity>
<entity eid="-E5" type="GPE" generic="0" class="SPC" level="NAM" subtype="OTHER" score="0.297996">
<mentref mid="-M10">Bath</mentref>
</entity>
<entity eid="-E6" type="DATE" generic="0" class="SPC" level="NONE" subtype="OTHER" score="1.0">
<mentref mid="-M3">2004</mentref>
</entity>
</entities>
<relations version="KLUE2_2014-03-26">
<relation rid="-R0" type="employedBy" subtype="OTHER">
<rel_entity_arg eid="-E0" argnum="1"/>
<rel_entity_arg eid="-E1" argnum="2"/>
<relmentions>
<relmention rmid="-R0-1" score="0.906314" class="SPECIFIC" modality="ASSERTED" tense="UNSPECIFIED">
<rel_mention_arg mid="-M0" argnum="1">John Smith</rel_mention_arg>
<rel_mention_arg mid="-M1" argnum="2">IBM</rel_mention_arg>
</relmention>
</relmentions>
</relation>
<relation rid="-R1" type="locatedAt" subtype="OTHER">
<rel_entity_arg eid="-E0" argnum="1"/>
<rel_entity_arg eid="-E2" argnum="2"/>
<relmentions>
<relmention rmid="-R1-1" score="0.585468" class="SPECIFIC" modality="ASSERTED" tense="UNSPECIFIED">
<rel_mention_arg mid="-M4" argnum="1">John</rel_mention_arg>
<rel_mention_arg mid="-M5" argnum="2">UK</rel_mention_arg>
</relmention>
</relmentions>
</relation>
<relation rid="-R2" type="locatedAt" subtype="OTHER">
<rel_entity_arg eid="-E0" argnum="1"/>
<rel_entity_arg eid="-E3" argnum="2"/>
<relmentions>
<relmention rmid="-R2-1" score="0.389106" class="SPECIFIC" modality="ASSERTED" tense="UNSPECIFIED">
<rel_mention_arg mid="-M4" argnum="1">John</rel_mention_arg>
<rel_mention_arg mid="-M6" argnum="2">town</rel_mention_arg>
</relmention>
</relmentions>
</relation>
<relation rid="-R3" type="educatedAt" subtype="OTHER">
<rel_entity_arg eid="-E0" argnum="1"/>
<rel_entity_arg eid="-E4" argnum="2"/>
<relmentions>
<relmention rmid="-R3-1" score="0.867989" class="SPECIFIC" modality="ASSERTED" tense="UNSPECIFIED">
<rel_mention_arg mid="-M8" argnum="1">John</rel_mention_arg>
<rel_mention_arg mid="-M9" argnum="2">University</rel_mention_arg>
</relmention>
</relmentions>
</relation>
<relation rid="-R4" type="basedIn" subtype="OTHER">
<rel_entity_arg eid="-E4" argnum="1"/>
<rel_entity_arg eid="-E5" argnum="2"/>
<relmentions>
<relmention rmid="-R4-1" score="0.720848" class="SPECIFIC" modality="ASSERTED" tense="UNSPECIFIED">
<rel_mention_arg mid="-M9" argnum="1">University</rel_mention_arg>
<rel_mention_arg mid="-M10" argnum="2">Bath</rel_mention_arg>
</relmention>
</relmentions>
</relation>
</relations>
</doc>
</rep>
"""


class CallbackRecorder:
    """Completion callback that records each (error, result) call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, err: Any, result: Any) -> None:
        self.calls.append((err, result))

    @property
    def error(self) -> Any:
        assert len(self.calls) == 1, f"expected exactly one callback, got {len(self.calls)}"
        return self.calls[0][0]

    @property
    def result(self) -> Any:
        assert len(self.calls) == 1, f"expected exactly one callback, got {len(self.calls)}"
        assert self.calls[0][0] is None, f"unexpected error: {self.calls[0][0]!r}"
        return self.calls[0][1]


def xml_handler(body: bytes = SAMPLE_XML, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Return a MockTransport handler that answers every request with ``body``."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=body, headers={"Content-Type": "application/xml"})

    return handler


@pytest.fixture
def recorder() -> CallbackRecorder:
    return CallbackRecorder()


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(requests_seen):
    """Factory for an ExtractionClient answering through ``handler``."""

    def factory(handler=None, environ=None) -> ExtractionClient:
        handler = handler or xml_handler()

        def recording(request: httpx.Request) -> httpx.Response:
            request.read()
            requests_seen.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(recording))
        return ExtractionClient(transport=HttpxTransport(client=client), environ=environ or {})

    return factory


@pytest.fixture
def make_async_client(requests_seen):
    """Factory for an AsyncExtractionClient answering through ``handler``."""

    def factory(handler=None, environ=None) -> AsyncExtractionClient:
        handler = handler or xml_handler()

        async def recording(request: httpx.Request) -> httpx.Response:
            await request.aread()
            requests_seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        return AsyncExtractionClient(transport=AsyncHttpxTransport(client=client), environ=environ or {})

    return factory

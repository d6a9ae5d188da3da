"""Streaming section parser for the relationship extraction XML.

The service response carries the submitted text, sentence and dependency
parses, and the three sections this package needs: ``mentions``,
``entities`` and ``relations``. The parser is fed the response body chunk by
chunk as it arrives and emits each wanted section as a plain object once its
closing tag has been read. Everything else is cleared as soon as it ends, so
the parse trees never accumulate in memory.

Element to object conversion:
    - attributes become keys with string values
    - child elements become keys named by tag; one child gives a bare dict,
      repeated children give a list
    - non-whitespace text is stored under ``"$t"``

For example ``<entity eid="-E1"><mentref mid="-M1"/></entity>`` becomes
``{"eid": "-E1", "mentref": {"mid": "-M1"}}``, while two ``mentref``
children would give a list of two dicts.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Iterable, Iterator

from relext.errors import DocumentParseError

DEFAULT_SECTIONS = ("mentions", "entities", "relations")
TEXT_KEY = "$t"

SectionEvent = tuple[str, dict[str, Any]]


def _local_tag(tag: str) -> str:
    """Strip XML namespace from tag for comparison."""
    if tag and "}" in tag:
        return tag.split("}", 1)[1]
    return tag or ""


def element_to_object(elem: ET.Element) -> dict[str, Any]:
    """Convert an element and its subtree to nested dicts and lists."""
    obj: dict[str, Any] = dict(elem.attrib)
    if elem.text and elem.text.strip():
        obj[TEXT_KEY] = elem.text

    for child in elem:
        tag = _local_tag(child.tag)
        value = element_to_object(child)
        if tag not in obj:
            obj[tag] = value
        elif isinstance(obj[tag], list):
            obj[tag].append(value)
        else:
            obj[tag] = [obj[tag], value]
    return obj


class SectionStreamParser:
    """Incremental parser that yields ``(section_name, object)`` events.

    Only the outermost occurrence of a section tag is emitted; a nested
    element that happens to share a section name is part of its section's
    object.
    """

    def __init__(self, sections: Iterable[str] = DEFAULT_SECTIONS):
        self.sections = frozenset(sections)
        self._parser = ET.XMLPullParser(events=("start", "end"))
        self._section_depth = 0

    def feed(self, chunk: bytes | str) -> Iterator[SectionEvent]:
        """Feed part of the document and yield any sections it completes.

        Raises:
            DocumentParseError: If the data is not well-formed XML.
        """
        try:
            self._parser.feed(chunk)
        except ET.ParseError as err:
            raise DocumentParseError(f"Malformed response document: {err}") from err
        yield from self._drain()

    def close(self) -> Iterator[SectionEvent]:
        """Signal the end of the document and yield any remaining sections.

        Raises:
            DocumentParseError: If the document is truncated or malformed.
        """
        try:
            self._parser.close()
        except ET.ParseError as err:
            raise DocumentParseError(f"Malformed response document: {err}") from err
        yield from self._drain()

    def _drain(self) -> Iterator[SectionEvent]:
        try:
            events = list(self._parser.read_events())
        except ET.ParseError as err:
            raise DocumentParseError(f"Malformed response document: {err}") from err

        for event, elem in events:
            tag = _local_tag(elem.tag)
            if event == "start":
                if tag in self.sections:
                    self._section_depth += 1
                continue

            if tag in self.sections:
                self._section_depth -= 1
                if self._section_depth == 0:
                    yield tag, element_to_object(elem)
                    elem.clear()
            elif self._section_depth == 0:
                elem.clear()

"""Assembly of the final result from streamed response sections.

The assembler is driven by events from the section parser. While the
document streams in it only projects and collects records; references are
resolved once the end of the document is reached, since a relationship may
point at an entity defined anywhere in its section.

    ACCUMULATING --on_end()--> COMPLETED   callback(None, result)
    ACCUMULATING --fail()----> FAILED      callback(error, None)

Both end states are terminal and the callback runs exactly once.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from relext.config import ExtractionOptions
from relext.errors import DocumentParseError
from relext.joiners import collect_entity_mentions, collect_relationship_mentions
from relext.logging import setup_logging
from relext.models import ExtractionResult, Mention, ProjectedEntity
from relext.normalize import as_list
from relext.projection import project_entity, project_mention

logger = setup_logging()

Callback = Callable[[Optional[BaseException], Optional[ExtractionResult]], Any]


class AssemblerState(str, Enum):
    """Lifecycle of a single extraction response."""

    ACCUMULATING = "accumulating"
    COMPLETED = "completed"
    FAILED = "failed"


class ResponseAssembler:
    """Collects the sections of one response and delivers the result.

    Entities and mentions are kept in dicts keyed by their raw id, so they
    iterate in the order they appeared in the document. An id seen twice
    replaces the earlier record.
    """

    def __init__(self, options: ExtractionOptions, callback: Callback):
        self.options = options
        self.callback = callback
        self.state = AssemblerState.ACCUMULATING
        self.entities: dict[str, ProjectedEntity] = {}
        self.mentions: dict[str, Mention] = {}
        self.relationships: list[dict[str, Any]] = []

    @property
    def done(self) -> bool:
        return self.state is not AssemblerState.ACCUMULATING

    def on_section(self, name: str, obj: dict[str, Any]) -> None:
        """Collect one completed ``entities``, ``mentions`` or ``relations`` section."""
        if self.done:
            logger.debug(f"Ignoring {name!r} section received after completion")
            return

        if name == "entities":
            for raw in as_list(obj.get("entity")):
                self.entities[raw.get("eid")] = project_entity(raw, self.options)
            logger.debug(f"Collected {len(self.entities)} entities")
        elif name == "mentions":
            for raw in as_list(obj.get("mention")):
                self.mentions[raw.get("mid")] = project_mention(raw, self.options)
            logger.debug(f"Collected {len(self.mentions)} mentions")
        elif name == "relations":
            self.relationships = as_list(obj.get("relation"))
            logger.debug(f"Collected {len(self.relationships)} relationships")

    def build_result(self) -> ExtractionResult:
        """Resolve references across the collected sections.

        Raises:
            DocumentIntegrityError: If any reference does not resolve.
        """
        entities = None
        relationships = None
        if self.options.include_mentions:
            entities = collect_entity_mentions(self.entities, self.mentions)
        if self.options.include_relationships:
            relationships = collect_relationship_mentions(
                self.options, self.entities, self.mentions, self.relationships
            )
        return ExtractionResult(entities=entities, relationships=relationships)

    def on_end(self) -> None:
        """Handle the end of the document: build the result and deliver it."""
        if self.done:
            logger.debug("Ignoring end of document received after completion")
            return

        try:
            result = self.build_result()
        except DocumentParseError as err:
            self.fail(err)
            return

        self.state = AssemblerState.COMPLETED
        logger.debug("Extraction response assembled")
        self.callback(None, result)

    def fail(self, error: BaseException) -> None:
        """Deliver ``error`` to the callback, unless a result was already delivered."""
        if self.done:
            logger.debug(f"Ignoring error received after completion: {error!r}")
            return

        self.state = AssemblerState.FAILED
        logger.debug(f"Extraction failed: {error!r}")
        self.callback(error, None)

"""Projection of raw service records into the caller's requested shape.

Each raw record arrives as a dict built from one XML element: attributes
as string values, covered text under ``"$t"``. Projection decides, from the
caller's options, which fields survive, converts scores and offsets to
numbers, and cleans ids. It never resolves references; that is left to
:mod:`relext.joiners` once the whole document has been read.
"""

from __future__ import annotations

from typing import Any

from relext.config import ExtractionOptions
from relext.models import Location, Mention, MentionScores, ProjectedEntity
from relext.normalize import as_list, clean_id, parse_offset, parse_score
from relext.parser import TEXT_KEY

# subtype the service emits when it has no real subtype
PLACEHOLDER_SUBTYPE = "OTHER"


def project_entity(raw: dict[str, Any], options: ExtractionOptions) -> ProjectedEntity:
    """Project a raw ``<entity>`` record.

    The ``generic`` flag is always dropped, as is a subtype of ``OTHER``.
    The mention references are kept, in document order, for the joiner.
    """
    subtype = raw.get("subtype")
    if subtype == PLACEHOLDER_SUBTYPE:
        subtype = None

    return ProjectedEntity(
        type=raw.get("type"),
        class_=raw.get("class"),
        level=raw.get("level"),
        subtype=subtype,
        score=parse_score(raw.get("score")) if options.include_scores else None,
        id=clean_id(raw.get("eid")) if options.include_ids else None,
        mention_ids=tuple(ref.get("mid") for ref in as_list(raw.get("mentref"))),
    )


def project_mention(raw: dict[str, Any], options: ExtractionOptions) -> Mention:
    """Project a raw ``<mention>`` record.

    The returned mention still carries ``etype``; the entity joiner drops it
    when embedding the mention under its entity.
    """
    scores = None
    if options.include_scores:
        scores = MentionScores(
            score=parse_score(raw.get("score")),
            coref=parse_score(raw.get("corefScore")),
        )

    location = None
    if options.include_locations:
        location = Location(
            begin=parse_offset(raw.get("begin")),
            end=parse_offset(raw.get("end")),
            head_begin=parse_offset(raw.get("head-begin")),
            head_end=parse_offset(raw.get("head-end")),
        )

    return Mention(
        mtype=raw.get("mtype"),
        etype=raw.get("etype"),
        role=raw.get("role"),
        class_=raw.get("class"),
        text=raw.get(TEXT_KEY),
        scores=scores,
        location=location,
        id=clean_id(raw.get("mid")) if options.include_ids else None,
    )

"""Output records for the relationship extraction client.

The service describes a document as three flat, id-keyed collections. These
models are the nested shape handed back to callers: entities grouping their
mentions, and relationships embedding the entities and mentions they link.

All models are frozen. Optional fields default to ``None`` and are left out
of :meth:`ExtractionResult.to_dict`, so a field the caller did not ask for is
absent rather than null. Field aliases carry the wire names that are not
Python identifiers (``class``, ``head-begin``, ``head-end``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Number = int | float


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Return the record as plain dicts and lists, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Location(_Record):
    """Character offsets of a mention in the submitted text."""

    begin: Number
    end: Number
    head_begin: Number = Field(alias="head-begin")
    head_end: Number = Field(alias="head-end")


class MentionScores(_Record):
    """Confidence that the span is a mention, and that it belongs to its entity."""

    score: float
    coref: float


class Mention(_Record):
    """One occurrence of an entity in the text."""

    mtype: str | None = Field(default=None, description="Surface form: NAM, PRO, NOM or NONE.")
    etype: str | None = Field(default=None, description="Type of the owning entity.")
    role: str | None = None
    class_: str | None = Field(default=None, alias="class")
    text: str | None = Field(default=None, description="The covered text span.")
    scores: MentionScores | None = None
    location: Location | None = None
    id: str | None = None


class EntityView(_Record):
    """Type-level description of an entity, as used inside relationships."""

    type: str | None = None
    class_: str | None = Field(default=None, alias="class")
    level: str | None = None
    subtype: str | None = None
    id: str | None = None


class Entity(EntityView):
    """An entity together with every mention of it."""

    score: float | None = None
    mentions: list[Mention] = Field(default_factory=list)


class ProjectedEntity(EntityView):
    """An entity as accumulated from the stream, before its mentions are resolved."""

    score: float | None = None
    mention_ids: tuple[str | None, ...] = ()

    def to_view(self) -> EntityView:
        return EntityView.model_validate(self.model_dump(include=set(EntityView.model_fields)))


class RelationshipEntities(_Record):
    one: EntityView
    two: EntityView


class RelationshipMention(_Record):
    """One place in the text where a relationship was found."""

    score: float | None = None
    class_: str | None = Field(default=None, alias="class")
    modality: str | None = None
    tense: str | None = None
    one: Mention
    two: Mention


class Relationship(_Record):
    """A typed link between two entities, with the mention pairs that show it."""

    type: str | None = None
    subtype: str | None = None
    entities: RelationshipEntities
    mentions: list[RelationshipMention] = Field(default_factory=list)


class ExtractionResult(_Record):
    """Final result delivered to the completion callback."""

    entities: list[Entity] | None = None
    relationships: list[Relationship] | None = None

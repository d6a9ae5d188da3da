"""Resolution of id references between the three service collections.

The service returns entities, mentions and relationships as separate lists
that point at each other by id. The joiners here turn those references into
embedded records:

- **Entities** get the mentions they list in ``mentref``, in reference order.
- **Relationships** get type-level views of their two entity arguments, and
  each relationship mention gets the two mention records it links.

Every embedded mention is a fresh deep copy, so no two places in the output
share a record. A reference that does not resolve raises
:class:`~relext.errors.DocumentIntegrityError`; nothing is silently dropped.
"""

from __future__ import annotations

from typing import Any, Mapping

from relext.config import ExtractionOptions
from relext.errors import DocumentIntegrityError
from relext.models import (
    Entity,
    EntityView,
    Mention,
    ProjectedEntity,
    Relationship,
    RelationshipEntities,
    RelationshipMention,
)
from relext.normalize import as_list, parse_score

# the only relationship type whose subtype is meaningful
TEMPORAL_RELATIONSHIP_TYPE = "timeOf"


def _lookup_mention(mentions: Mapping[str, Mention], mention_id: str | None, owner: str) -> Mention:
    if mention_id is None or mention_id not in mentions:
        raise DocumentIntegrityError(f"{owner} references unknown mention {mention_id!r}")
    return mentions[mention_id]


def _lookup_entity(entities: Mapping[str, ProjectedEntity], entity_id: str | None, owner: str) -> EntityView:
    if entity_id is None or entity_id not in entities:
        raise DocumentIntegrityError(f"{owner} references unknown entity {entity_id!r}")
    return entities[entity_id].to_view()


def _argument_ids(args: Any, key: str, owner: str) -> tuple[str | None, str | None]:
    """Return the ids of an ordered pair of argument references."""
    args = as_list(args)
    if len(args) != 2:
        raise DocumentIntegrityError(f"{owner} has {len(args)} arguments, expected 2")
    return args[0].get(key), args[1].get(key)


def collect_entity_mentions(
    entities: Mapping[str, ProjectedEntity],
    mentions: Mapping[str, Mention],
) -> list[Entity]:
    """Embed each entity's mentions in it.

    Entities are returned in the mapping's iteration order, which for the
    assembler is the order they appeared in the document. Embedded mentions
    lose ``etype``, since it repeats the entity's own type.

    Raises:
        DocumentIntegrityError: If an entity lists a mention id not in ``mentions``.
    """
    result = []
    for entity_id, entity in entities.items():
        embedded = [
            _lookup_mention(mentions, mention_id, f"Entity {entity_id!r}").model_copy(
                deep=True, update={"etype": None}
            )
            for mention_id in entity.mention_ids
        ]
        result.append(
            Entity(
                type=entity.type,
                class_=entity.class_,
                level=entity.level,
                subtype=entity.subtype,
                score=entity.score,
                id=entity.id,
                mentions=embedded,
            )
        )
    return result


def _collect_relationship_mention(
    raw: dict[str, Any],
    mentions: Mapping[str, Mention],
    options: ExtractionOptions,
    owner: str,
) -> RelationshipMention:
    owner = f"{owner} mention {raw.get('rmid')!r}"
    mid_one, mid_two = _argument_ids(raw.get("rel_mention_arg"), "mid", owner)
    one = _lookup_mention(mentions, mid_one, owner).model_copy(deep=True, update={"scores": None})
    two = _lookup_mention(mentions, mid_two, owner).model_copy(deep=True, update={"scores": None})

    return RelationshipMention(
        score=parse_score(raw.get("score")) if options.include_scores else None,
        class_=raw.get("class"),
        modality=raw.get("modality"),
        tense=raw.get("tense"),
        one=one,
        two=two,
    )


def collect_relationship_mentions(
    options: ExtractionOptions,
    entities: Mapping[str, ProjectedEntity],
    mentions: Mapping[str, Mention],
    relationships: list[dict[str, Any]],
) -> list[Relationship]:
    """Resolve the entity and mention references of each raw relationship.

    The two entity arguments keep their order: the first becomes ``one``,
    the second ``two``. Entities appear as type-level views without their
    mentions or score. Each relationship mention keeps its own score (when
    scores are requested) but its mention records drop theirs.

    Raises:
        DocumentIntegrityError: If an argument id is unknown, or an argument
            list does not hold exactly two references.
    """
    result = []
    for raw in relationships:
        owner = f"Relationship {raw.get('rid')!r}"
        eid_one, eid_two = _argument_ids(raw.get("rel_entity_arg"), "eid", owner)

        relmentions = as_list(raw.get("relmentions"))
        occurrences = [
            _collect_relationship_mention(relmention, mentions, options, owner)
            for container in relmentions
            for relmention in as_list(container.get("relmention"))
        ]

        relationship_type = raw.get("type")
        result.append(
            Relationship(
                type=relationship_type,
                subtype=raw.get("subtype") if relationship_type == TEMPORAL_RELATIONSHIP_TYPE else None,
                entities=RelationshipEntities(
                    one=_lookup_entity(entities, eid_one, owner),
                    two=_lookup_entity(entities, eid_two, owner),
                ),
                mentions=occurrences,
            )
        )
    return result

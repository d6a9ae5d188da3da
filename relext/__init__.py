"""
Relationship Extraction client - nested entities and relationships from flat XML.

Submits text to the Watson Relationship Extraction service and restructures
its flat, id-referenced XML response into entities grouped with their
mentions, and relationships embedding the entities and mentions they link.

    from relext import extract

    extract(text, {"includeRelationships": True}, callback)
"""

from relext.client import (
    AsyncExtractionClient,
    ExtractionClient,
    aextract,
    extract,
)
from relext.config import ApiCredentials, ExtractionOptions
from relext.errors import (
    ConfigurationError,
    DocumentIntegrityError,
    DocumentParseError,
    ExtractionError,
    ProtocolError,
    UsageError,
)
from relext.models import (
    Entity,
    EntityView,
    ExtractionResult,
    Location,
    Mention,
    MentionScores,
    Relationship,
    RelationshipEntities,
    RelationshipMention,
)

__all__ = [
    "extract",
    "aextract",
    "ExtractionClient",
    "AsyncExtractionClient",
    "ExtractionOptions",
    "ApiCredentials",
    "ExtractionResult",
    "Entity",
    "EntityView",
    "Mention",
    "MentionScores",
    "Location",
    "Relationship",
    "RelationshipEntities",
    "RelationshipMention",
    "ExtractionError",
    "UsageError",
    "ConfigurationError",
    "ProtocolError",
    "DocumentParseError",
    "DocumentIntegrityError",
]

__version__ = "0.1.0"

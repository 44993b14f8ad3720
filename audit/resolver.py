"""
Map request paths to the entity they act upon.

``ENTITY_RULES`` is the single source of truth: the first rule whose prefix
appears as a path segment wins. The id is the segment ``id_offset`` places
after the prefix and the sub-action the one ``sub_action_offset`` places after.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional

from .models import EntityType


@dataclass(frozen=True)
class EntityReference:
    entity_type: str
    entity_id: Optional[str]
    sub_action: Optional[str] = None


class EntityRule(NamedTuple):
    prefix: str
    entity_type: str
    id_offset: int = 1
    sub_action_offset: int = 2


ENTITY_RULES = (
    EntityRule("users", EntityType.USER),
    EntityRule("boards", EntityType.BOARD),
    EntityRule("lists", EntityType.LIST),
    EntityRule("cards", EntityType.CARD),
    EntityRule("checklists", EntityType.CHECKLIST),
    EntityRule("checklist-items", EntityType.CHECKLIST_ITEM),
    EntityRule("comments", EntityType.COMMENT),
    EntityRule("labels", EntityType.LABEL),
    EntityRule("portfolios", EntityType.PORTFOLIO),
    EntityRule("notifications", EntityType.NOTIFICATION),
)

SYSTEM_REFERENCE = EntityReference(str(EntityType.SYSTEM), "system", None)


def _segment_at(segments, index):
    if 0 <= index < len(segments):
        return segments[index]
    return None


def resolve_entity(path: str, rules=ENTITY_RULES) -> EntityReference:
    """
    Resolve the entity a path refers to.

    >>> resolve_entity("/api/users/12/change-password")
    EntityReference(entity_type='user', entity_id='12', sub_action='change-password')

    Paths matching no rule resolve to the generic system reference.
    """
    segments = [segment for segment in path.split("/") if segment]
    for rule in rules:
        if rule.prefix not in segments:
            continue
        position = segments.index(rule.prefix)
        return EntityReference(
            entity_type=str(rule.entity_type),
            entity_id=_segment_at(segments, position + rule.id_offset),
            sub_action=_segment_at(segments, position + rule.sub_action_offset),
        )
    return SYSTEM_REFERENCE

"""Tag aggregation: collapse raw tag associations into {id, name, count}.

WHY: Tag rows are stored once per user tagging action, so an entity's tag
list repeats the same tag. Documents show each distinct tag once with
the number of times it was applied.

RULES:
- Grouping key is the tag id; count is the number of occurrences
- The name comes from the first occurrence of an id; later differing
  names are ignored
- Output order is first-seen order for the given input order
- Empty or missing input yields an empty list
- Every aggregate is emitted (no "last one wins" collapsing)
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from catalog_serializer.core.ir import TagAggregate, TagAssociation


def aggregate(associations: Optional[Iterable[TagAssociation]]) -> List[TagAggregate]:
    """Group ``associations`` by tag id, preserving first-seen order."""
    if not associations:
        return []

    grouped: Dict[int, TagAggregate] = {}
    for assoc in associations:
        existing = grouped.get(assoc.id)
        if existing is None:
            grouped[assoc.id] = TagAggregate(id=assoc.id, name=assoc.name, count=1)
        else:
            existing.count += 1
    return list(grouped.values())


def tag_names(associations: Optional[Iterable[TagAssociation]]) -> List[str]:
    """Tag names in association order (duplicates kept), for song records."""
    if not associations:
        return []
    return [assoc.name for assoc in associations]

"""Optimistic list updates."""

from collections.abc import Sequence
from typing import Protocol, TypeVar


class HasId(Protocol):
    id: int


ItemT = TypeVar("ItemT", bound=HasId)


def apply_optimistic_removal(items: Sequence[ItemT], item_id: int) -> list[ItemT]:
    """Return ``items`` without the record whose id is ``item_id``.

    Applied before the backend has confirmed the delete and never rolled back:
    if the delete then fails, the record stays hidden until the next refetch.
    """
    return [item for item in items if item.id != item_id]

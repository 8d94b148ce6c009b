from typing import List, Sequence

from models.menu import MenuItem


def renumber(ordered: Sequence[MenuItem]) -> List[MenuItem]:
    """Give a sibling group contiguous sort_order values 0..n-1; returns the items that changed."""
    changed = []
    for position, item in enumerate(ordered):
        if item.sort_order != position:
            item.sort_order = position
            changed.append(item)
    return changed


def insert_at(siblings: Sequence[MenuItem], item: MenuItem, position: int) -> List[MenuItem]:
    """Place ``item`` at ``position`` among ``siblings`` (clamped to the group bounds)."""
    group = [sibling for sibling in siblings if sibling.id != item.id]
    position = max(0, min(position, len(group)))
    group.insert(position, item)
    return group

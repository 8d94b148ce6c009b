"""
Atomic drag-and-drop reorder.

A batch describes where the client wants some items to end up. The whole
batch is overlaid on the stored menu, the resulting tree is validated as a
unit, and only then are the differences written, in one transaction.
Nothing is written when any entry is invalid.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from sqlmodel import Session

from database import transaction
from helpers.activity import log_activity
from models.menu import MenuItem
from settings import logger
from .ancestry import check_reparent, find_cycle, parent_map
from .errors import (
    CrossMenuReference, CycleDetected, NavigationError, NotFound, OrphanReference, ReorderRejected, ValidationError
)
from .repository import MenuItemRepository, MenuRepository


# (parent_id, sort_order) an item should end up with
Placement = Tuple[Optional[int], int]


@dataclass
class ReorderEntry:
    """Desired end position of one item: its parent and its order among siblings."""
    id: int
    parent_id: Optional[int]
    order: int


class ReorderProcessor:
    """Validates and applies reorder batches for one menu."""

    def __init__(self, db_session: Session):
        self.db_session = db_session
        self.items = MenuItemRepository(db_session)
        self.menus = MenuRepository(db_session)

    def _reject(self, entry: ReorderEntry, cause: NavigationError) -> ReorderRejected:
        return ReorderRejected(
            reason=f"Entry for item {entry.id} rejected: {cause.message}",
            item_id=entry.id,
            cause=cause
        )

    def _check_reference(self, menu_id: int, entry: ReorderEntry, ref_id: int,
                         current: Dict[int, MenuItem], foreign: Dict[int, MenuItem]) -> None:
        if ref_id in current:
            return
        other = foreign.get(ref_id)
        if other is None:
            raise self._reject(entry, NotFound("MenuItem", ref_id))
        if ref_id == entry.id:
            cause = CrossMenuReference(entry.id, entry.parent_id,
                                       message=f"Item {ref_id} belongs to menu {other.menu_id}, not menu {menu_id}")
        else:
            cause = CrossMenuReference(entry.id, ref_id,
                                       message=f"Parent item {ref_id} belongs to menu {other.menu_id}, not menu {menu_id}")
        raise self._reject(entry, cause)

    def plan(self, menu_id: int, entries: Sequence[ReorderEntry]) -> Tuple[List[MenuItem], Dict[int, Placement]]:
        """
        Validate a batch against the stored menu without touching any row.

        Returns ``(items, changes)``: the menu's items exactly as stored, and
        the proposed ``(parent_id, sort_order)`` of every item whose position
        would differ. Raises ReorderRejected naming the first bad entry.
        """
        self.menus.get(menu_id)
        current = {item.id: item for item in self.items.list_by_menu(menu_id)}

        referenced = {entry.id for entry in entries}
        referenced.update(entry.parent_id for entry in entries if entry.parent_id is not None)
        foreign = self.items.find_many(sorted(referenced - set(current)))

        # entry checks, in the order the client sent them
        seen = set()
        for entry in entries:
            if entry.id in seen:
                raise self._reject(entry, ValidationError("id", f"item {entry.id} appears more than once in the batch"))
            seen.add(entry.id)
            self._check_reference(menu_id, entry, entry.id, current, foreign)
            if entry.parent_id is not None:
                self._check_reference(menu_id, entry, entry.parent_id, current, foreign)

        # the proposed end-state of the whole menu
        proposed = parent_map(current.values())
        hints: Dict[int, Tuple[int, int, int]] = {}
        for index, entry in enumerate(entries):
            proposed[entry.id] = entry.parent_id
            hints[entry.id] = (entry.order, 0, index)

        for item_id, parent_id in sorted(proposed.items()):
            if parent_id is not None and parent_id not in current:
                cause = OrphanReference(item_id, parent_id)
                raise ReorderRejected(reason=f"Menu would keep a dangling parent: {cause.message}",
                                      item_id=item_id, cause=cause)

        for entry in entries:
            try:
                check_reparent(entry.id, entry.parent_id, proposed)
            except CycleDetected as e:
                raise self._reject(entry, e)

        cycle = find_cycle(proposed)
        if cycle:
            cause = CycleDetected(item_id=cycle[0], parent_id=proposed[cycle[0]], cycle_path=cycle)
            raise ReorderRejected(reason=f"Menu would contain a cycle: {cause.message}", item_id=cycle[0], cause=cause)

        # contiguous positions within every sibling group of the proposed tree
        groups: Dict[Optional[int], List[MenuItem]] = {}
        for item_id, item in current.items():
            groups.setdefault(proposed[item_id], []).append(item)

        changes: Dict[int, Placement] = {}
        for parent_id, group in groups.items():
            # client hints win ties against untouched siblings, then batch order decides
            group.sort(key=lambda item: hints.get(item.id, (item.sort_order, 1, item.id)) + (item.id,))
            for position, item in enumerate(group):
                if (item.parent_id, item.sort_order) != (parent_id, position):
                    changes[item.id] = (parent_id, position)

        return list(current.values()), changes

    def apply(self, menu_id: int, entries: Sequence[ReorderEntry], user_id: Optional[str] = None) -> List[MenuItem]:
        """Validate and commit a batch; returns the menu's items in their new state."""
        try:
            items, changes = self.plan(menu_id, entries)
        except ReorderRejected as e:
            logger.warning("Reorder batch rejected", extra={
                "menu_id": menu_id,
                "item_id": e.item_id,
                "reason": e.reason
            })
            raise

        by_id = {item.id: item for item in items}
        with transaction(self.db_session):
            for item_id, (parent_id, sort_order) in sorted(changes.items()):
                item = by_id[item_id]
                item.parent_id = parent_id
                item.sort_order = sort_order
                self.items.update(item)
            if changes:
                log_activity(
                    self.db_session,
                    action="updated",
                    resource_type="navigation",
                    resource_id=menu_id,
                    description=f"Reordered navigation menu #{menu_id} ({len(changes)} item(s) moved)",
                    user_id=user_id
                )

        logger.info("Reorder batch applied", extra={
            "menu_id": menu_id,
            "entries": len(entries),
            "writes": len(changes)
        })
        return items

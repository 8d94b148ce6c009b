from typing import Any, Dict, List, Optional

from sqlmodel import Session

from database import transaction
from helpers.activity import log_activity
from models.menu import MenuItem
from settings import logger
from .ancestry import check_reparent, parent_map
from .errors import CrossMenuReference, NotFound, ValidationError
from .links import validate_label, validate_link
from .ordering import insert_at, renumber
from .pages import PageRegistry, default_registry
from .repository import MenuItemRepository, MenuRepository


UPDATABLE_FIELDS = {"label", "link_type", "target", "parent_id", "open_new_tab", "is_active", "sort_order", "menu_id"}
NULLABLE_FIELDS = {"parent_id", "target"}


class MenuItemService:
    """Create, edit and delete single menu items while keeping the tree valid."""

    def __init__(self, db_session: Session, pages: Optional[PageRegistry] = None):
        self.db_session = db_session
        self.items = MenuItemRepository(db_session)
        self.menus = MenuRepository(db_session)
        self.pages = pages or default_registry

    def get_item(self, item_id: int) -> MenuItem:
        return self.items.get(item_id)

    def _resolve_parent(self, menu_id: int, parent_id: int, item_id: Optional[int] = None) -> MenuItem:
        parent = self.items.find(parent_id)
        if not parent:
            raise NotFound("MenuItem", parent_id)
        if parent.menu_id != menu_id:
            raise CrossMenuReference(item_id, parent_id,
                                     message=f"Parent item {parent_id} belongs to menu {parent.menu_id}, not menu {menu_id}")
        return parent

    def create_item(
        self,
        menu_id: int,
        label: Optional[str],
        link_type: Optional[str],
        target: Optional[str] = None,
        parent_id: Optional[int] = None,
        open_new_tab: bool = False,
        is_active: bool = True,
        sort_order: Optional[int] = None,
        user_id: Optional[str] = None
    ) -> MenuItem:
        """
        Add an item to a menu.

        Without ``sort_order`` the item goes last among its siblings; with it
        the item is slotted in at that position and the group renumbered.
        A brand new item cannot be anyone's ancestor, so no cycle check runs.
        """
        self.menus.get(menu_id)
        label = validate_label(label)
        link_type, target, open_new_tab = validate_link(link_type, target, open_new_tab, self.pages)
        if parent_id is not None:
            self._resolve_parent(menu_id, parent_id)

        with transaction(self.db_session):
            siblings = self.items.siblings(menu_id, parent_id)
            item = MenuItem(
                menu_id=menu_id,
                parent_id=parent_id,
                label=label,
                link_type=link_type,
                target=target,
                open_new_tab=open_new_tab,
                is_active=is_active,
                sort_order=siblings[-1].sort_order + 1 if siblings else 0
            )
            self.items.insert(item)

            if sort_order is not None:
                for sibling in renumber(insert_at(siblings, item, sort_order)):
                    self.items.update(sibling)

            log_activity(
                self.db_session,
                action="created",
                resource_type="navigation_item",
                resource_id=item.id,
                resource_title=label,
                description=f"Added '{label}' to navigation menu #{menu_id}",
                user_id=user_id
            )

        self.db_session.refresh(item)
        return item

    def update_item(self, item_id: int, changes: Dict[str, Any], user_id: Optional[str] = None) -> MenuItem:
        """Apply a partial edit; a parent change is checked for cycles against the stored menu."""
        item = self.items.get(item_id)

        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "field cannot be updated")
        changes = {key: value for key, value in changes.items() if value is not None or key in NULLABLE_FIELDS}

        if "menu_id" in changes and changes["menu_id"] != item.menu_id:
            raise ValidationError("menu_id", "an item cannot move to another menu")

        label = validate_label(changes["label"]) if "label" in changes else item.label

        link_type, target, open_new_tab = item.link_type, item.target, item.open_new_tab
        if {"link_type", "target", "open_new_tab"} & set(changes):
            link_type, target, open_new_tab = validate_link(
                changes.get("link_type", item.link_type),
                changes.get("target", item.target),
                changes.get("open_new_tab", item.open_new_tab),
                self.pages
            )

        old_parent_id = item.parent_id
        new_parent_id = changes.get("parent_id", old_parent_id)
        moved = new_parent_id != old_parent_id
        if moved and new_parent_id is not None:
            self._resolve_parent(item.menu_id, new_parent_id, item_id=item.id)
            check_reparent(item.id, new_parent_id, parent_map(self.items.list_by_menu(item.menu_id)))

        position = changes.get("sort_order")

        with transaction(self.db_session):
            item.label = label
            item.link_type = link_type
            item.target = target
            item.open_new_tab = open_new_tab
            item.is_active = changes.get("is_active", item.is_active)
            item.parent_id = new_parent_id
            self.items.update(item)

            if moved or position is not None:
                group = self.items.siblings(item.menu_id, new_parent_id)
                if position is None:
                    position = len(group)
                for sibling in renumber(insert_at(group, item, position)):
                    self.items.update(sibling)
            if moved:
                for sibling in renumber(self.items.siblings(item.menu_id, old_parent_id)):
                    self.items.update(sibling)

            log_activity(
                self.db_session,
                action="updated",
                resource_type="navigation_item",
                resource_id=item.id,
                resource_title=item.label,
                description=f"Updated navigation item '{item.label}'",
                user_id=user_id
            )

        self.db_session.refresh(item)
        if moved:
            logger.info("Menu item reparented", extra={
                "item_id": item.id,
                "from_parent_id": old_parent_id,
                "to_parent_id": new_parent_id
            })
        return item

    def delete_item(self, item_id: int, user_id: Optional[str] = None) -> List[int]:
        """Remove an item and its whole subtree; returns every deleted id."""
        item = self.items.get(item_id)
        menu_id, parent_id, label = item.menu_id, item.parent_id, item.label

        with transaction(self.db_session):
            removed = self.items.delete(item_id)
            for sibling in renumber(self.items.siblings(menu_id, parent_id)):
                self.items.update(sibling)
            log_activity(
                self.db_session,
                action="deleted",
                resource_type="navigation_item",
                resource_id=item_id,
                resource_title=label,
                description=f"Deleted navigation item '{label}' and {len(removed) - 1} descendant(s)",
                user_id=user_id
            )

        return removed

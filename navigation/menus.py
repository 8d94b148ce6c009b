from typing import List, Optional, Tuple

from sqlmodel import Session

from database import transaction
from helpers.activity import log_activity
from models.menu import Menu, MenuLocation
from settings import logger
from .errors import NotFound, ValidationError
from .pages import PageRegistry, default_registry
from .repository import MenuItemRepository, MenuRepository
from .tree import TreeNode, build_tree, visible_items


DEFAULT_MENU_NAME = "New Menu"


def parse_location(value: Optional[str]) -> str:
    try:
        return MenuLocation(value).value
    except ValueError:
        allowed = ", ".join(location.value for location in MenuLocation)
        raise ValidationError("location", f"must be one of: {allowed}")


class MenuService:
    """Menu containers and read access to their trees."""

    def __init__(self, db_session: Session, pages: Optional[PageRegistry] = None):
        self.db_session = db_session
        self.menus = MenuRepository(db_session)
        self.items = MenuItemRepository(db_session)
        self.pages = pages or default_registry

    def list_menus(self) -> List[Tuple[Menu, int]]:
        counts = self.menus.item_counts()
        return [(menu, counts.get(menu.id, 0)) for menu in self.menus.list_all()]

    def get_menu(self, menu_id: int) -> Menu:
        return self.menus.get(menu_id)

    def create_menu(self, name: Optional[str] = None, location: Optional[str] = None,
                    user_id: Optional[str] = None) -> Menu:
        name = (name or "").strip() or DEFAULT_MENU_NAME
        location = parse_location((location or "").strip() or MenuLocation.HEADER.value)

        with transaction(self.db_session):
            menu = self.menus.insert(Menu(name=name, location=location))
            log_activity(
                self.db_session,
                action="created",
                resource_type="navigation",
                resource_id=menu.id,
                resource_title=name,
                description=f"Created navigation menu '{name}'",
                user_id=user_id
            )

        self.db_session.refresh(menu)
        return menu

    def update_menu(self, menu_id: int, name: Optional[str] = None, location: Optional[str] = None,
                    user_id: Optional[str] = None) -> Menu:
        menu = self.menus.get(menu_id)
        if name is not None and not name.strip():
            raise ValidationError("name", "name cannot be blank")
        if location is not None:
            location = parse_location(location)

        with transaction(self.db_session):
            if name is not None:
                menu.name = name.strip()
            if location is not None:
                menu.location = location
            self.menus.update(menu)
            log_activity(
                self.db_session,
                action="updated",
                resource_type="navigation",
                resource_id=menu.id,
                resource_title=menu.name,
                description=f"Updated navigation menu '{menu.name}'",
                user_id=user_id
            )

        self.db_session.refresh(menu)
        return menu

    def delete_menu(self, menu_id: int, user_id: Optional[str] = None) -> int:
        """Delete a menu together with all of its items; returns how many items went with it."""
        with transaction(self.db_session):
            removed = self.menus.delete(menu_id)
            log_activity(
                self.db_session,
                action="deleted",
                resource_type="navigation",
                resource_id=menu_id,
                description=f"Deleted navigation menu #{menu_id}",
                user_id=user_id
            )
        return removed

    def menu_tree(self, menu_id: int, active_only: bool = False) -> List[TreeNode]:
        self.menus.get(menu_id)
        items = self.items.list_by_menu(menu_id)
        if active_only:
            items = visible_items(items)
        return build_tree(items, self.pages)

    def tree_for_location(self, location: str) -> Tuple[Menu, List[TreeNode]]:
        """Public view: the newest menu at ``location`` with its active items only."""
        location = parse_location(location)
        menu = self.menus.find_by_location(location)
        if not menu:
            logger.debug("No menu configured for location", extra={"location": location})
            raise NotFound("Menu", location)
        return menu, self.menu_tree(menu.id, active_only=True)

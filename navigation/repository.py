from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from models.menu import Menu, MenuItem
from .ancestry import descendant_ids, parent_map
from .errors import NotFound


class MenuRepository:
    """Persistence for menu containers. Never commits; callers own the transaction."""

    def __init__(self, db_session: Session):
        self.db_session = db_session

    def find(self, menu_id: int) -> Optional[Menu]:
        return self.db_session.exec(select(Menu).where(Menu.id == menu_id)).first()

    def get(self, menu_id: int) -> Menu:
        menu = self.find(menu_id)
        if not menu:
            raise NotFound("Menu", menu_id)
        return menu

    def find_by_location(self, location: str) -> Optional[Menu]:
        statement = select(Menu).where(Menu.location == location).order_by(Menu.created_at.desc(), Menu.id.desc())
        return self.db_session.exec(statement).first()

    def list_all(self) -> List[Menu]:
        statement = select(Menu).order_by(Menu.created_at.desc(), Menu.id.desc())
        return list(self.db_session.exec(statement).all())

    def item_counts(self) -> Dict[int, int]:
        statement = select(MenuItem.menu_id, func.count(MenuItem.id)).group_by(MenuItem.menu_id)
        return {menu_id: count for menu_id, count in self.db_session.exec(statement).all()}

    def insert(self, menu: Menu) -> Menu:
        self.db_session.add(menu)
        self.db_session.flush()
        self.db_session.refresh(menu)
        return menu

    def update(self, menu: Menu) -> None:
        menu.updated_at = datetime.now(timezone.utc)
        self.db_session.add(menu)
        self.db_session.flush()

    def delete(self, menu_id: int) -> int:
        """Delete the menu and every item it owns; returns the number of items removed."""
        menu = self.get(menu_id)
        removed = MenuItemRepository(self.db_session).delete_by_menu(menu_id)
        self.db_session.delete(menu)
        self.db_session.flush()
        return removed


class MenuItemRepository:
    """Flat-table access to menu items. Never commits; callers own the transaction."""

    def __init__(self, db_session: Session):
        self.db_session = db_session

    def find(self, item_id: int) -> Optional[MenuItem]:
        return self.db_session.exec(select(MenuItem).where(MenuItem.id == item_id)).first()

    def get(self, item_id: int) -> MenuItem:
        item = self.find(item_id)
        if not item:
            raise NotFound("MenuItem", item_id)
        return item

    def find_many(self, item_ids: List[int]) -> Dict[int, MenuItem]:
        if not item_ids:
            return {}
        statement = select(MenuItem).where(MenuItem.id.in_(item_ids))
        return {item.id: item for item in self.db_session.exec(statement).all()}

    def list_by_menu(self, menu_id: int) -> List[MenuItem]:
        statement = select(MenuItem).where(MenuItem.menu_id == menu_id)
        return list(self.db_session.exec(statement).all())

    def siblings(self, menu_id: int, parent_id: Optional[int]) -> List[MenuItem]:
        """Items sharing ``parent_id`` within the menu, in display order."""
        statement = select(MenuItem).where(MenuItem.menu_id == menu_id)
        if parent_id is None:
            statement = statement.where(MenuItem.parent_id.is_(None))
        else:
            statement = statement.where(MenuItem.parent_id == parent_id)
        statement = statement.order_by(MenuItem.sort_order, MenuItem.id)
        return list(self.db_session.exec(statement).all())

    def insert(self, item: MenuItem) -> MenuItem:
        self.db_session.add(item)
        self.db_session.flush()
        self.db_session.refresh(item)
        return item

    def update(self, item: MenuItem) -> None:
        self.db_session.add(item)
        self.db_session.flush()

    def delete(self, item_id: int) -> List[int]:
        """Delete an item with its whole subtree; returns the removed ids."""
        item = self.get(item_id)
        items = {row.id: row for row in self.list_by_menu(item.menu_id)}
        doomed = [item_id] + descendant_ids(item_id, parent_map(items.values()))

        # deepest first so no row ever points at a deleted parent
        for doomed_id in reversed(doomed):
            self.db_session.delete(items[doomed_id])
            self.db_session.flush()
        return doomed

    def delete_by_menu(self, menu_id: int) -> int:
        items = {row.id: row for row in self.list_by_menu(menu_id)}
        parents = parent_map(items.values())
        ordered = []
        for root_id in sorted(node for node, parent in parents.items() if parent is None):
            ordered.append(root_id)
            ordered.extend(descendant_ids(root_id, parents))
        # rows trapped in a corrupt cycle are unreachable from any root
        ordered.extend(sorted(set(items) - set(ordered)))

        for doomed_id in reversed(ordered):
            self.db_session.delete(items[doomed_id])
            self.db_session.flush()
        return len(ordered)

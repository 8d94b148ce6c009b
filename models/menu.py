from sqlmodel import SQLModel, Field
from enum import Enum
from typing import Optional
from datetime import datetime, timezone


class MenuLocation(str, Enum):
    """Template placement of a navigation menu."""
    HEADER = "header"
    FOOTER = "footer"
    SIDEBAR = "sidebar"


class LinkType(str, Enum):
    """What a menu item points at."""
    PAGE = "page"
    URL = "url"
    DROPDOWN = "dropdown"


class Menu(SQLModel, table=True):
    """Named navigation structure placed at one location of the site."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    location: str = Field(default=MenuLocation.HEADER.value, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class MenuItem(SQLModel, table=True):
    """One node of a menu tree; nesting is expressed through parent_id only."""
    id: Optional[int] = Field(default=None, primary_key=True)
    menu_id: int = Field(foreign_key="menu.id", index=True)
    parent_id: Optional[int] = Field(default=None, foreign_key="menuitem.id", index=True)
    label: str
    link_type: str = Field(default=LinkType.PAGE.value)
    target: str = Field(default="", description="Page identifier or URL, empty for dropdowns")
    open_new_tab: bool = Field(default=False)
    is_active: bool = Field(default=True)
    sort_order: int = Field(default=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

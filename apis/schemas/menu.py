from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class CreateMenuRequest(BaseModel):
    """Schema for creating a navigation menu."""
    name: Optional[str] = Field(default=None, description="Display name, defaults to 'New Menu'")
    location: Optional[str] = Field(default=None, description="header, footer or sidebar (default header)")


class UpdateMenuRequest(BaseModel):
    """Schema for updating a navigation menu."""
    name: Optional[str] = Field(default=None, description="New display name")
    location: Optional[str] = Field(default=None, description="New location")


class MenuResponse(BaseModel):
    """Schema for menu responses."""
    id: int = Field(..., description="Menu ID")
    name: str = Field(..., description="Display name")
    location: str = Field(..., description="Template placement")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    item_count: int = Field(default=0, description="Number of items in the menu")

    model_config = {"from_attributes": True}


class MenuListResponse(BaseModel):
    """Schema for menu list responses."""
    menus: List[MenuResponse]
    total_count: int


class CreateMenuItemRequest(BaseModel):
    """Schema for adding an item to a menu."""
    label: str = Field(default="", description="Display text")
    link_type: str = Field(default="page", description="page, url or dropdown")
    target: Optional[str] = Field(default=None, description="Page identifier or URL; ignored for dropdowns")
    parent_id: Optional[int] = Field(default=None, description="Parent item ID, null for a root item")
    open_new_tab: bool = Field(default=False, description="Open link in a new tab")
    is_active: bool = Field(default=True, description="Shown on the public site")
    sort_order: Optional[int] = Field(default=None, description="Position among siblings, appended when omitted")


class UpdateMenuItemRequest(BaseModel):
    """Schema for editing a menu item; only sent fields change."""
    label: Optional[str] = Field(default=None, description="New display text")
    link_type: Optional[str] = Field(default=None, description="New link type")
    target: Optional[str] = Field(default=None, description="New page identifier or URL")
    parent_id: Optional[int] = Field(default=None, description="New parent item ID, null moves the item to the root")
    open_new_tab: Optional[bool] = Field(default=None, description="Open link in a new tab")
    is_active: Optional[bool] = Field(default=None, description="Shown on the public site")
    sort_order: Optional[int] = Field(default=None, description="New position among siblings")


class MenuItemResponse(BaseModel):
    """Schema for menu item responses."""
    id: int = Field(..., description="Menu item ID")
    menu_id: int = Field(..., description="Owning menu ID")
    parent_id: Optional[int] = Field(default=None, description="Parent item ID")
    label: str = Field(..., description="Display text")
    link_type: str = Field(..., description="page, url or dropdown")
    target: str = Field(..., description="Page identifier or URL")
    open_new_tab: bool = Field(..., description="Open link in a new tab")
    is_active: bool = Field(..., description="Shown on the public site")
    sort_order: int = Field(..., description="Position among siblings")

    model_config = {"from_attributes": True}


class DeleteMenuItemResponse(BaseModel):
    """Schema for item deletion responses."""
    message: str
    deleted_ids: List[int] = Field(default_factory=list, description="The item and all of its descendants")


class ReorderItem(BaseModel):
    """One entry of a drag-and-drop reorder batch."""
    id: int = Field(..., description="Menu item ID")
    parent_id: Optional[int] = Field(default=None, description="Desired parent, null for root")
    order: int = Field(..., description="Desired position among siblings")

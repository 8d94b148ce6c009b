from fastapi import APIRouter, Depends
from sqlmodel import Session
from database import get_session
from models.auth import Token
from models.menu import Menu
from helpers.auth import get_auth_token, require_user, require_admin
from helpers.errors import http_error
from navigation.errors import NavigationError
from navigation.menus import MenuService
from navigation.mutations import MenuItemService
from navigation.reorder import ReorderEntry, ReorderProcessor
from navigation.tree import TreeNode, build_tree
from .schemas.menu import (
    CreateMenuRequest, UpdateMenuRequest, MenuResponse, MenuListResponse,
    CreateMenuItemRequest, MenuItemResponse, ReorderItem
)
from apis.schemas.auth import MessageResponse
from typing import List

router = APIRouter(prefix="/menus", tags=["navigation"])


def menu_response(menu: Menu, item_count: int = 0) -> MenuResponse:
    response = MenuResponse.model_validate(menu)
    response.item_count = item_count
    return response


@router.get("")
async def list_menus(
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MenuListResponse:
    """List navigation menus, newest first, with their item counts."""
    await require_user(token=token, db_session=db_session)

    menus = MenuService(db_session).list_menus()
    return MenuListResponse(
        menus=[menu_response(menu, count) for menu, count in menus],
        total_count=len(menus)
    )


@router.post("")
async def create_menu(
    menu_data: CreateMenuRequest,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MenuResponse:
    """Create a navigation menu (Admins only)."""
    user = await require_admin(token=token, db_session=db_session)

    try:
        menu = MenuService(db_session).create_menu(menu_data.name, menu_data.location, user_id=user.id)
    except NavigationError as e:
        raise http_error(e)

    return menu_response(menu)


@router.get("/location/{location}/tree")
async def get_public_tree(
    location: str,
    db_session: Session = Depends(get_session)
) -> List[TreeNode]:
    """Active items of the menu placed at ``location``, as rendered on the public site."""
    try:
        menu, tree = MenuService(db_session).tree_for_location(location)
    except NavigationError as e:
        raise http_error(e)

    return tree


@router.get("/{menu_id}")
async def get_menu(
    menu_id: int,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MenuResponse:
    """Get a specific navigation menu."""
    await require_user(token=token, db_session=db_session)

    service = MenuService(db_session)
    try:
        menu = service.get_menu(menu_id)
    except NavigationError as e:
        raise http_error(e)

    return menu_response(menu, len(service.items.list_by_menu(menu_id)))


@router.put("/{menu_id}")
async def update_menu(
    menu_id: int,
    menu_data: UpdateMenuRequest,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MenuResponse:
    """Rename or relocate a navigation menu (Admins only)."""
    user = await require_admin(token=token, db_session=db_session)

    service = MenuService(db_session)
    try:
        menu = service.update_menu(menu_id, name=menu_data.name, location=menu_data.location, user_id=user.id)
    except NavigationError as e:
        raise http_error(e)

    return menu_response(menu, len(service.items.list_by_menu(menu_id)))


@router.delete("/{menu_id}")
async def delete_menu(
    menu_id: int,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MessageResponse:
    """Delete a navigation menu and all of its items (Admins only)."""
    user = await require_admin(token=token, db_session=db_session)

    try:
        removed = MenuService(db_session).delete_menu(menu_id, user_id=user.id)
    except NavigationError as e:
        raise http_error(e)

    return MessageResponse(message=f"Menu deleted successfully ({removed} items removed)")


@router.get("/{menu_id}/tree")
async def get_menu_tree(
    menu_id: int,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> List[TreeNode]:
    """Full item tree of a menu for the editor, inactive items included."""
    await require_user(token=token, db_session=db_session)

    try:
        return MenuService(db_session).menu_tree(menu_id)
    except NavigationError as e:
        raise http_error(e)


@router.post("/{menu_id}/items")
async def create_menu_item(
    menu_id: int,
    item_data: CreateMenuItemRequest,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MenuItemResponse:
    """Add an item to a menu (Admins only)."""
    user = await require_admin(token=token, db_session=db_session)

    try:
        item = MenuItemService(db_session).create_item(
            menu_id=menu_id,
            label=item_data.label,
            link_type=item_data.link_type,
            target=item_data.target,
            parent_id=item_data.parent_id,
            open_new_tab=item_data.open_new_tab,
            is_active=item_data.is_active,
            sort_order=item_data.sort_order,
            user_id=user.id
        )
    except NavigationError as e:
        raise http_error(e)

    return MenuItemResponse.model_validate(item)


@router.post("/{menu_id}/reorder")
async def reorder_menu(
    menu_id: int,
    items: List[ReorderItem],
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> List[TreeNode]:
    """
    Apply a drag-and-drop batch of ``{id, parent_id, order}`` entries (Admins only).

    The batch is validated as a whole and applied in one transaction, or
    rejected as a whole. Responds with the resulting tree.
    """
    user = await require_admin(token=token, db_session=db_session)

    entries = [ReorderEntry(id=item.id, parent_id=item.parent_id, order=item.order) for item in items]
    try:
        updated = ReorderProcessor(db_session).apply(menu_id, entries, user_id=user.id)
        return build_tree(updated)
    except NavigationError as e:
        raise http_error(e)

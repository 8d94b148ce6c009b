from fastapi import APIRouter, Depends
from sqlmodel import Session
from database import get_session
from models.auth import Token
from helpers.auth import get_auth_token, require_user, require_admin
from helpers.errors import http_error
from navigation.errors import NavigationError
from navigation.mutations import MenuItemService
from .schemas.menu import UpdateMenuItemRequest, MenuItemResponse, DeleteMenuItemResponse

router = APIRouter(prefix="/menu-items", tags=["navigation"])


@router.get("/{item_id}")
async def get_menu_item(
    item_id: int,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MenuItemResponse:
    """Get a specific menu item."""
    await require_user(token=token, db_session=db_session)

    try:
        item = MenuItemService(db_session).get_item(item_id)
    except NavigationError as e:
        raise http_error(e)

    return MenuItemResponse.model_validate(item)


@router.put("/{item_id}")
async def update_menu_item(
    item_id: int,
    item_data: UpdateMenuItemRequest,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> MenuItemResponse:
    """Edit a menu item (Admins only). Only fields present in the body change."""
    user = await require_admin(token=token, db_session=db_session)

    # exclude_unset keeps an explicit "parent_id": null (move to root) apart from an omitted parent_id
    changes = item_data.model_dump(exclude_unset=True)
    try:
        item = MenuItemService(db_session).update_item(item_id, changes, user_id=user.id)
    except NavigationError as e:
        raise http_error(e)

    return MenuItemResponse.model_validate(item)


@router.delete("/{item_id}")
async def delete_menu_item(
    item_id: int,
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> DeleteMenuItemResponse:
    """Delete a menu item together with everything nested below it (Admins only)."""
    user = await require_admin(token=token, db_session=db_session)

    try:
        removed = MenuItemService(db_session).delete_item(item_id, user_id=user.id)
    except NavigationError as e:
        raise http_error(e)

    return DeleteMenuItemResponse(message="Menu item deleted successfully", deleted_ids=removed)

"""
Global Configuration API

Exposes configuration the admin frontend needs before it can render the
navigation editor.
"""

from fastapi import APIRouter
from pydantic import BaseModel
from typing import List

import settings
from models.menu import LinkType, MenuLocation
from navigation.pages import default_registry

router = APIRouter(prefix="/globals", tags=["globals"])


class GlobalsResponse(BaseModel):
    """Global application configuration response."""
    frontend_project_name: str
    page_options: List[str]
    link_types: List[str]
    menu_locations: List[str]


@router.get("/", response_model=GlobalsResponse)
async def get_globals() -> GlobalsResponse:
    """Get global application configuration from environment variables."""
    return GlobalsResponse(
        frontend_project_name=settings.FRONTEND_PROJECT_NAME,
        page_options=list(default_registry.identifiers),
        link_types=[link_type.value for link_type in LinkType],
        menu_locations=[location.value for location in MenuLocation]
    )

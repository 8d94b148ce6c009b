from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select
from database import get_session
from models.auth import Token
from models.activity import ActivityLog
from helpers.auth import get_auth_token, require_admin
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

router = APIRouter(prefix="/activity", tags=["activity"])


class ActivityResponse(BaseModel):
    """Schema for audit trail entries."""
    id: int = Field(..., description="Entry ID")
    user_id: Optional[str] = Field(default=None, description="User who made the change")
    action: str = Field(..., description="created, updated or deleted")
    resource_type: str = Field(..., description="Kind of resource changed")
    resource_id: Optional[int] = Field(default=None, description="ID of the changed resource")
    resource_title: str = Field(..., description="Title of the changed resource")
    description: str = Field(..., description="Human readable summary")
    created_at: datetime = Field(..., description="When the change happened")

    model_config = {"from_attributes": True}


@router.get("")
async def list_activity(
    limit: int = Query(default=50, ge=1, le=500, description="Maximum number of entries"),
    token: Token = Depends(get_auth_token),
    db_session: Session = Depends(get_session)
) -> List[ActivityResponse]:
    """Most recent admin changes first (Admins only)."""
    await require_admin(token=token, db_session=db_session)

    statement = select(ActivityLog).order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit)
    entries = db_session.exec(statement).all()

    return [ActivityResponse.model_validate(entry) for entry in entries]

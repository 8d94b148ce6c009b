from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone


class ActivityLog(SQLModel, table=True):
    """Audit trail of admin changes."""
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[str] = Field(default=None, foreign_key="user.id", index=True)
    action: str = Field(index=True)
    resource_type: str
    resource_id: Optional[int] = Field(default=None)
    resource_title: str = Field(default="")
    description: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

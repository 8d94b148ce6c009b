from typing import Optional

from sqlmodel import Session

from models.activity import ActivityLog
from settings import logger


def log_activity(
    db_session: Session,
    action: str,
    resource_type: str,
    description: str,
    resource_id: Optional[int] = None,
    resource_title: str = "",
    user_id: Optional[str] = None
) -> ActivityLog:
    """Record an admin change in the audit trail; written with the caller's transaction."""
    entry = ActivityLog(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        resource_title=resource_title,
        description=description
    )
    db_session.add(entry)
    logger.info(description, extra={
        "action": action,
        "resource_type": resource_type,
        "resource_id": resource_id,
        "user_id": user_id
    })
    return entry

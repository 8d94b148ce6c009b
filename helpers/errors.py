from fastapi import HTTPException

from navigation.errors import NavigationError, OrphanReference
from settings import logger


def http_error(error: NavigationError) -> HTTPException:
    """Turn a navigation domain error into an HTTP response with a structured body."""
    if isinstance(error, OrphanReference):
        logger.error("Navigation data integrity violation", extra={
            "item_id": error.item_id,
            "parent_id": error.parent_id
        })
    return HTTPException(status_code=error.status_code, detail=error.to_dict())

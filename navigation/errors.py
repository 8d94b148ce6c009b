"""
Domain errors raised by the navigation tree engine.

Every error carries a stable ``code`` and the HTTP status the API layer
should answer with, so routers can turn them into responses without
knowing each case.
"""

from typing import Any, Dict, List, Optional


class NavigationError(Exception):
    """Base class for all navigation tree errors."""

    code = "NAVIGATION_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class ValidationError(NavigationError):
    """A field of a create/update request is missing or invalid."""

    code = "VALIDATION_ERROR"
    status_code = 422

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"field": self.field, "reason": self.reason})
        return data


class NotFound(NavigationError):
    """Referenced menu or item does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"entity": self.entity, "entity_id": self.entity_id})
        return data


class CrossMenuReference(NavigationError):
    """A parent (or moved item) belongs to a different menu."""

    code = "CROSS_MENU_REFERENCE"
    status_code = 400

    def __init__(self, item_id: Optional[int], parent_id: Optional[int], message: Optional[str] = None):
        super().__init__(message or f"Item {parent_id} belongs to a different menu than item {item_id}")
        self.item_id = item_id
        self.parent_id = parent_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"item_id": self.item_id, "parent_id": self.parent_id})
        return data


class CycleDetected(NavigationError):
    """Assigning the parent would make an item its own ancestor."""

    code = "CYCLE_DETECTED"
    status_code = 409

    def __init__(self, item_id: int, parent_id: Optional[int], cycle_path: Optional[List[int]] = None):
        self.item_id = item_id
        self.parent_id = parent_id
        self.cycle_path = cycle_path or []
        if parent_id == item_id:
            message = f"Item {item_id} cannot be its own parent"
        else:
            message = f"Item {parent_id} is a descendant of item {item_id}"
        if self.cycle_path:
            message += " (" + " -> ".join(str(node) for node in self.cycle_path) + ")"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "item_id": self.item_id,
            "parent_id": self.parent_id,
            "cycle_path": self.cycle_path,
        })
        return data


class ReorderRejected(NavigationError):
    """A reorder batch failed validation and was discarded as a whole."""

    code = "REORDER_REJECTED"
    status_code = 409

    def __init__(self, reason: str, item_id: Optional[int] = None, cause: Optional[NavigationError] = None):
        super().__init__(reason)
        self.reason = reason
        self.item_id = item_id
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "reason": self.reason,
            "item_id": self.item_id,
            "cause": self.cause.to_dict() if self.cause else None,
        })
        return data


class OrphanReference(NavigationError):
    """Stored data is corrupt: an item's parent is missing from its menu."""

    code = "ORPHAN_REFERENCE"
    status_code = 500

    def __init__(self, item_id: int, parent_id: Optional[int], message: Optional[str] = None):
        super().__init__(message or f"Item {item_id} references missing parent {parent_id}")
        self.item_id = item_id
        self.parent_id = parent_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"item_id": self.item_id, "parent_id": self.parent_id})
        return data

from typing import Optional, Tuple

from models.menu import LinkType
from .errors import ValidationError
from .pages import PageRegistry


BLOCKED_URL_SCHEMES = ("javascript:", "data:", "vbscript:")


def parse_link_type(value: Optional[str]) -> LinkType:
    try:
        return LinkType(value)
    except ValueError:
        allowed = ", ".join(link_type.value for link_type in LinkType)
        raise ValidationError("link_type", f"must be one of: {allowed}")


def validate_label(label: Optional[str]) -> str:
    if label is None or not label.strip():
        raise ValidationError("label", "label is required")
    return label.strip()


def validate_link(link_type: Optional[str], target: Optional[str], open_new_tab: bool,
                  pages: PageRegistry) -> Tuple[str, str, bool]:
    """
    Check ``target`` against the rules of ``link_type``.

    Returns the normalized ``(link_type, target, open_new_tab)`` to store.
    Dropdowns are pure grouping nodes: whatever target they were sent is
    discarded and they never open a new tab.
    """
    kind = parse_link_type(link_type)
    target = (target or "").strip()

    if kind == LinkType.DROPDOWN:
        return kind.value, "", False

    if not target:
        raise ValidationError("target", f"a {kind.value} item needs a target")

    if kind == LinkType.PAGE:
        if not pages.is_valid(target):
            raise ValidationError("target", f"unknown page identifier '{target}'")
    elif kind == LinkType.URL:
        if any(char.isspace() for char in target):
            raise ValidationError("target", "URL must not contain whitespace")
        if target.lower().startswith(BLOCKED_URL_SCHEMES):
            raise ValidationError("target", "URL scheme is not allowed")

    return kind.value, target, bool(open_new_tab)


def resolve_href(link_type: str, target: str, pages: PageRegistry) -> Optional[str]:
    """Where a rendered item should link to; None for dropdowns."""
    if link_type == LinkType.PAGE.value:
        return pages.href_for(target)
    if link_type == LinkType.URL.value:
        return target
    return None

"""
Assembles the flat item list of one menu into a nested forest.

The assembler does not care about ``is_active``; callers that render the
public site pass the result of ``visible_items`` instead of the raw list.
"""

from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from models.menu import MenuItem
from settings import logger
from .errors import OrphanReference
from .links import resolve_href
from .pages import PageRegistry, default_registry


class TreeNode(BaseModel):
    """One rendered menu item with its ordered children."""
    id: int = Field(..., description="Menu item ID")
    label: str = Field(..., description="Display text")
    link_type: str = Field(..., description="page, url or dropdown")
    target: str = Field(..., description="Page identifier or URL")
    href: Optional[str] = Field(default=None, description="Resolved link, null for dropdowns")
    open_new_tab: bool = Field(..., description="Open link in a new tab")
    is_active: bool = Field(..., description="Shown on the public site")
    children: List["TreeNode"] = Field(default_factory=list, description="Child items in display order")


TreeNode.model_rebuild()


def sibling_key(item: MenuItem):
    return (item.sort_order, item.id)


def build_tree(items: Iterable[MenuItem], pages: PageRegistry = default_registry) -> List[TreeNode]:
    items = list(items)
    by_id: Dict[int, MenuItem] = {item.id: item for item in items}

    for item in items:
        if item.parent_id is not None and item.parent_id not in by_id:
            logger.error("Menu item references a missing parent", extra={
                "item_id": item.id,
                "parent_id": item.parent_id,
                "menu_id": item.menu_id
            })
            raise OrphanReference(item.id, item.parent_id)

    nodes = {
        item.id: TreeNode(
            id=item.id,
            label=item.label,
            link_type=item.link_type,
            target=item.target,
            href=resolve_href(item.link_type, item.target, pages),
            open_new_tab=item.open_new_tab,
            is_active=item.is_active,
        )
        for item in items
    }

    roots = []
    for item in sorted(items, key=sibling_key):
        if item.parent_id is None:
            roots.append(nodes[item.id])
        else:
            nodes[item.parent_id].children.append(nodes[item.id])

    # items caught in a parent loop never hang below a root
    stray = sorted(set(nodes) - _reachable_ids(roots))
    if stray:
        logger.error("Menu items unreachable from any root", extra={"item_ids": stray})
        raise OrphanReference(stray[0], by_id[stray[0]].parent_id,
                              message=f"Items {stray} are not reachable from any root item")

    return roots


def _reachable_ids(roots: List[TreeNode]) -> Set[int]:
    seen = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        seen.add(node.id)
        stack.extend(node.children)
    return seen


def visible_items(items: Iterable[MenuItem]) -> List[MenuItem]:
    """Active items whose ancestors are all active too."""
    items = list(items)
    by_id = {item.id: item for item in items}
    visible: Dict[int, bool] = {}

    def check(item_id: int) -> bool:
        chain = []
        current: Optional[int] = item_id
        result = True
        while current is not None and current in by_id and current not in chain:
            if current in visible:
                result = visible[current]
                break
            if not by_id[current].is_active:
                result = False
                break
            chain.append(current)
            current = by_id[current].parent_id
        for node in chain:
            visible[node] = result
        return result

    return [item for item in items if check(item.id)]

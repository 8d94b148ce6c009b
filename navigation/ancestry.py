"""
Ancestry checks over a menu's parent links.

All functions work on a plain ``{item_id: parent_id}`` mapping so the same
walk can be run against stored state or against a proposed end-state that
has not been written yet.
"""

from collections import deque
from typing import Dict, Iterable, List, Mapping, Optional

from .errors import CycleDetected


ParentMap = Mapping[int, Optional[int]]


def parent_map(items: Iterable) -> Dict[int, Optional[int]]:
    """Index items by id, keeping only their parent reference."""
    return {item.id: item.parent_id for item in items}


def ancestor_chain(node_id: Optional[int], parents: ParentMap) -> List[int]:
    """Return ``node_id`` followed by its ancestors, stopping at a root or a repeat."""
    chain = []
    visited = set()
    current = node_id
    while current is not None and current not in visited:
        chain.append(current)
        visited.add(current)
        current = parents.get(current)
    return chain


def is_descendant_or_self(candidate_parent_id: Optional[int], item_id: int, parents: ParentMap) -> bool:
    """
    Tell whether ``candidate_parent_id`` is ``item_id`` or lies below it.

    Walks upward from the candidate parent. A chain that loops back on
    itself without reaching ``item_id`` is already corrupt, so it is
    reported as True and the reparent gets refused.
    """
    visited = set()
    current = candidate_parent_id
    while current is not None:
        if current == item_id:
            return True
        if current in visited:
            return True
        visited.add(current)
        current = parents.get(current)
    return False


def check_reparent(item_id: int, new_parent_id: Optional[int], parents: ParentMap) -> None:
    """Raise CycleDetected if ``item_id`` may not hang below ``new_parent_id``."""
    if new_parent_id is None:
        return
    if is_descendant_or_self(new_parent_id, item_id, parents):
        path = ancestor_chain(new_parent_id, parents)
        if item_id in path:
            path = path[:path.index(item_id) + 1]
        raise CycleDetected(item_id=item_id, parent_id=new_parent_id, cycle_path=path)


def find_cycle(parents: ParentMap) -> Optional[List[int]]:
    """Return one cycle of the parent graph as a list of ids, or None if it is a forest."""
    # 1 = on the current walk, 2 = known to reach a root
    state: Dict[int, int] = {}
    for start in parents:
        if state.get(start) == 2:
            continue
        walk = []
        current = start
        while current is not None and current in parents and state.get(current) != 2:
            if state.get(current) == 1:
                return walk[walk.index(current):] + [current]
            state[current] = 1
            walk.append(current)
            current = parents[current]
        for node in walk:
            state[node] = 2
    return None


def descendant_ids(item_id: int, parents: ParentMap) -> List[int]:
    """All ids below ``item_id`` in breadth-first order (parents before children)."""
    children: Dict[int, List[int]] = {}
    for node, parent in parents.items():
        if parent is not None:
            children.setdefault(parent, []).append(node)

    found = []
    seen = {item_id}
    queue = deque([item_id])
    while queue:
        current = queue.popleft()
        for child in sorted(children.get(current, [])):
            if child not in seen:
                seen.add(child)
                found.append(child)
                queue.append(child)
    return found

"""Drag-and-drop reordering over ordered sibling groups ("scopes").

One algorithm serves every ordered collection in a packing list:
  - items within a category, and items dropped into another category
    (scope_key="categoryId")
  - tasks within a stage (scope_key=None, the entries are the stage's tasks)
  - stages within the list (scope_key=None)

Entries are plain dicts carrying at least 'id' and 'order'. The functions
here never mutate their input; they return placements that callers apply.
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from packy.utilities.constants import DROP_POSITIONS

__all__ = ['plan_move', 'apply_placements', 'normalize_orders', 'is_dense', 'sort_by_order']

Placements = Dict[str, Dict[str, Any]]


def _order_of(entry: Dict[str, Any]) -> int:
    order = entry.get('order')
    return order if isinstance(order, int) else 0


def sort_by_order(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Stable sort by 'order' (missing order counts as 0, ties keep list position)."""
    return sorted(entries, key=_order_of)


def _scope(entry: Dict[str, Any], scope_key: Optional[str]):
    return entry.get(scope_key) if scope_key else None


def plan_move(entries: List[Dict[str, Any]], moved_id: str, target_id: str, position: str,
              scope_key: Optional[str] = None) -> Optional[Placements]:
    """Compute the placements produced by dropping `moved_id` before/after `target_id`.

    Returns {entry_id: {'order': int[, scope_key: new_scope]}} for every entry whose
    placement is (re)assigned, or None when the gesture is a no-op (self drop, unknown id).

    The moved entry is taken out of its scope first, so the insertion index is the
    target's index in the remaining sequence (+1 for 'after'). For a same-scope move
    this is the same as using the target's original index and stepping back by one
    when the moved entry sat in front of it. For a cross-scope move the moved entry is
    not part of the destination yet, so the target's index is used as-is and every
    destination entry from the insertion index onward shifts up by one. The origin
    scope is re-densified afterwards.
    """
    if position not in DROP_POSITIONS:
        raise ValueError(f"Invalid drop position: {position!r} (expected 'before' or 'after')")
    if moved_id == target_id:
        return None

    moved = next((e for e in entries if e.get('id') == moved_id), None)
    target = next((e for e in entries if e.get('id') == target_id), None)
    if moved is None or target is None:
        return None

    origin_scope = _scope(moved, scope_key)
    dest_scope = _scope(target, scope_key)

    destination = sort_by_order([
        e for e in entries
        if _scope(e, scope_key) == dest_scope and e.get('id') != moved_id
    ])
    insert_at = next(i for i, e in enumerate(destination) if e.get('id') == target_id)
    if position == 'after':
        insert_at += 1
    destination.insert(insert_at, moved)

    placements: Placements = {}
    for index, entry in enumerate(destination):
        placements[entry['id']] = {'order': index}

    if scope_key and origin_scope != dest_scope:
        placements[moved_id][scope_key] = dest_scope
        remaining = sort_by_order([
            e for e in entries
            if _scope(e, scope_key) == origin_scope and e.get('id') != moved_id
        ])
        for index, entry in enumerate(remaining):
            placements[entry['id']] = {'order': index}

    return placements


def apply_placements(entries: List[Dict[str, Any]], placements: Placements) -> List[Dict[str, Any]]:
    """Return new entry dicts with placements merged in; list position is preserved."""
    return [
        {**entry, **placements[entry['id']]} if entry.get('id') in placements else entry
        for entry in entries
    ]


def normalize_orders(entries: List[Dict[str, Any]], scope_key: Optional[str] = None) -> List[Dict[str, Any]]:
    '''Re-densify every scope to 0..n-1, keeping the current relative order.'''
    scopes: Dict[Any, List[Dict[str, Any]]] = {}
    for entry in entries:
        scopes.setdefault(_scope(entry, scope_key), []).append(entry)

    placements: Placements = {}
    for members in scopes.values():
        for index, entry in enumerate(sort_by_order(members)):
            if entry.get('order') != index:
                placements[entry['id']] = {'order': index}
    if not placements:
        return list(entries)
    return apply_placements(entries, placements)


def is_dense(entries: List[Dict[str, Any]], scope_key: Optional[str] = None) -> bool:
    scopes: Dict[Any, List[int]] = {}
    for entry in entries:
        scopes.setdefault(_scope(entry, scope_key), []).append(entry.get('order'))
    return all(
        all(isinstance(o, int) for o in orders) and sorted(orders) == list(range(len(orders)))
        for orders in scopes.values()
    )

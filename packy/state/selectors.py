"""Derived views over a store state.

Pure functions of a state dict (as returned by Store.get_state()); nothing is
cached, every call recomputes from the document.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from packy.domain.Item import Item
from packy.logic.ordering.reorder import sort_by_order

__all__ = [
    'get_current_list', 'get_trip_days', 'get_item_quantity', 'get_packing_progress',
    'get_items_by_bag', 'get_items_by_category', 'get_unassigned_items',
    'get_stage_progress', 'get_effective_bag_id', 'get_bag_summary',
]

logger = logging.getLogger(__name__)


def get_current_list(state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return state.get('currentList')


def get_trip_days(state: Dict[str, Any]) -> int:
    trip = (get_current_list(state) or {}).get('trip') or {}
    return trip.get('calculatedDays') or 1


def _percent(done: int, total: int) -> int:
    if not total:
        return 0
    return int(done * 100 / total + 0.5)


def get_item_quantity(item: Dict[str, Any], days: int) -> int:
    """Quantity to pack; an unparseable expression or unknown type counts as 1."""
    try:
        resolved = Item.from_dict(item)
    except ValueError as e:
        logger.warning("Item %s: %s", item.get('id'), e)
        return 1
    return resolved.resolve_quantity(days)


def get_packing_progress(state: Dict[str, Any]) -> int:
    '''Percentage (0-100) of items marked packed.'''
    items = (get_current_list(state) or {}).get('items') or []
    return _percent(sum(1 for i in items if i.get('packed')), len(items))


def _category_index(document: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {c.get('id'): c for c in document.get('categories') or []}


def _effective_bag(item: Dict[str, Any], categories: Dict[str, Dict[str, Any]]) -> Optional[str]:
    if item.get('bagId'):
        return item['bagId']
    category = categories.get(item.get('categoryId')) or {}
    return category.get('defaultBagId') or None


def get_effective_bag_id(state: Dict[str, Any], item: Dict[str, Any]) -> Optional[str]:
    """item.bagId, falling back to the owning category's defaultBagId."""
    document = get_current_list(state) or {}
    return _effective_bag(item, _category_index(document))


def get_items_by_bag(state: Dict[str, Any], bag_id: str) -> List[Dict[str, Any]]:
    document = get_current_list(state)
    if not document:
        return []
    categories = _category_index(document)
    return [i for i in document.get('items') or [] if _effective_bag(i, categories) == bag_id]


def get_items_by_category(state: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    '''{categoryId: items sorted by order}.'''
    document = get_current_list(state)
    if not document:
        return {}
    grouped: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
    for item in document.get('items') or []:
        grouped[item.get('categoryId')].append(item)
    return {cat_id: sort_by_order(items) for cat_id, items in grouped.items()}


def get_unassigned_items(state: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Items with no bag of their own and no category default bag."""
    document = get_current_list(state)
    if not document:
        return []
    categories = _category_index(document)
    return [i for i in document.get('items') or [] if _effective_bag(i, categories) is None]


def get_stage_progress(state: Dict[str, Any], stage_id: str) -> int:
    stages = (get_current_list(state) or {}).get('stages') or []
    stage = next((s for s in stages if s.get('id') == stage_id), None)
    tasks = (stage or {}).get('tasks') or []
    return _percent(sum(1 for t in tasks if t.get('completed')), len(tasks))


def get_bag_summary(state: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Per-bag counts: items, packed items and total quantity for the trip length."""
    document = get_current_list(state)
    if not document:
        return []
    days = get_trip_days(state)
    categories = _category_index(document)
    summary = []
    for bag in document.get('bags') or []:
        items = [i for i in document.get('items') or [] if _effective_bag(i, categories) == bag.get('id')]
        summary.append({
            'bagId': bag.get('id'),
            'name': bag.get('name'),
            'items': len(items),
            'packed': sum(1 for i in items if i.get('packed')),
            'quantity': sum(get_item_quantity(i, days) for i in items),
        })
    return summary

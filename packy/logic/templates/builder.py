"""Template instantiation and "save as template".

Provides:
  create_from_template(template, trip_data, template_id=None) -> new list document
  create_empty_list(trip_data) -> new list document with default categories and stages
  build_template(document, template_name, description='') -> template document
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from packy.domain.Category import Category
from packy.domain.PackingList import PackingList, normalize_document, now_iso
from packy.domain.Stage import Stage
from packy.domain.Trip import Trip
from packy.utilities.constants import DEFAULT_CATEGORIES, DEFAULT_STAGES, DOCUMENT_VERSION
from packy.utilities.ids import generate_short_id

__all__ = ['create_from_template', 'create_empty_list', 'build_template',
           'default_categories', 'default_stages']


def _trip_dict(trip_data: Dict[str, Any]) -> Dict[str, Any]:
    return Trip.from_dict(trip_data).to_dict()


def default_categories() -> List[Dict[str, Any]]:
    return [Category(name=name, icon=icon).to_dict() for name, icon in DEFAULT_CATEGORIES]


def default_stages() -> List[Dict[str, Any]]:
    return [Stage(name=name, order=idx).to_dict() for idx, name in enumerate(DEFAULT_STAGES)]


def create_from_template(template: Dict[str, Any], trip_data: Dict[str, Any],
                         template_id: Optional[str] = None) -> Dict[str, Any]:
    """Copy a template into a fresh list: new ids everywhere, references rewired, flags cleared."""
    bag_ids: Dict[str, str] = {}
    category_ids: Dict[str, str] = {}

    bags = []
    for bag in template.get('bags') or []:
        new_id = generate_short_id()
        bag_ids[bag.get('id')] = new_id
        bags.append({**bag, 'id': new_id})

    categories = []
    for cat in template.get('categories') or []:
        new_id = generate_short_id()
        category_ids[cat.get('id')] = new_id
        default_bag = cat.get('defaultBagId')
        categories.append({
            **cat,
            'id': new_id,
            'defaultBagId': bag_ids.get(default_bag) if default_bag else None,
        })

    items = []
    for item in template.get('items') or []:
        bag_id = item.get('bagId')
        items.append({
            **item,
            'id': generate_short_id(),
            'categoryId': category_ids.get(item.get('categoryId'), item.get('categoryId')),
            'bagId': bag_ids.get(bag_id) if bag_id else None,
            'packed': False,
        })

    stages = [
        {
            **stage,
            'id': generate_short_id(),
            'tasks': [
                {**task, 'id': generate_short_id(), 'completed': False}
                for task in stage.get('tasks') or []
            ],
        }
        for stage in template.get('stages') or []
    ]

    return normalize_document({
        'meta': PackingList.new_meta(source_template=template_id),
        'trip': _trip_dict(trip_data),
        'bags': bags,
        'categories': categories,
        'items': items,
        'stages': stages,
    })


def create_empty_list(trip_data: Dict[str, Any]) -> Dict[str, Any]:
    return PackingList(
        trip=Trip.from_dict(trip_data),
        categories=[Category.from_dict(c) for c in default_categories()],
        stages=[Stage.from_dict(s) for s in default_stages()],
    ).to_dict()


def build_template(document: Dict[str, Any], template_name: str, description: str = '',
                   author: str = 'User') -> Dict[str, Any]:
    '''Strip trip details and progress from a list so it can be reused as a template.'''
    meta = document.get('meta') or {}
    return {
        'meta': {
            'version': meta.get('version') or DOCUMENT_VERSION,
            'templateName': template_name,
            'description': description,
            'author': author,
            'isTemplate': True,
            'createdAt': now_iso(),
        },
        'bags': [dict(bag) for bag in document.get('bags') or []],
        'categories': [dict(cat) for cat in document.get('categories') or []],
        'items': [{**item, 'packed': False} for item in document.get('items') or []],
        'stages': [
            {**stage, 'tasks': [{**task, 'completed': False} for task in stage.get('tasks') or []]}
            for stage in document.get('stages') or []
        ],
    }

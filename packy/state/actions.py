"""State actions: every change to a store goes through these methods.

Each mutating action reads the current document from the store, builds the next
document and commits it with a single set_state() call, so every action is one
undo step. Reorder/move gestures that turn out to be no-ops commit nothing.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from packy.domain.Bag import Bag
from packy.domain.Category import Category
from packy.domain.Item import Item
from packy.domain.PackingList import normalize_document
from packy.domain.Stage import Stage
from packy.domain.Task import Task
from packy.domain.Trip import Trip
from packy.infra.Template_Repository import TemplateRepository
from packy.logic.ordering.reorder import apply_placements, normalize_orders, plan_move
from packy.logic.templates.builder import build_template, create_empty_list, create_from_template
from packy.state.State_Store import Store
from packy.utilities.constants import QUANTITY_TYPES, TOAST_TYPES, VIEWS
from packy.utilities.dates import calculate_days, is_valid_date_range, to_date_string
from packy.utilities.ids import generate_short_id
from packy.utilities.validators import ImportValidationError, validate_packing_list

logger = logging.getLogger(__name__)

_PROTECTED_KEYS = ('id',)


class NoActiveListError(RuntimeError):
    """A list-level action was called while no packing list is loaded."""


class EntityNotFoundError(LookupError):
    """An id passed to an action does not exist in the current list."""


def _clean(updates: Dict[str, Any], *extra_protected: str) -> Dict[str, Any]:
    protected = _PROTECTED_KEYS + extra_protected
    return {k: v for k, v in (updates or {}).items() if k not in protected}


def _find(entries: List[Dict[str, Any]], entity_id: str, label: str) -> Dict[str, Any]:
    for entry in entries:
        if entry.get('id') == entity_id:
            return entry
    raise EntityNotFoundError(f"{label} not found: {entity_id}")


class ListActions:
    def __init__(self, store: Store, templates: Optional[TemplateRepository] = None):
        self.store = store
        self.templates = templates or TemplateRepository()

    # --- Plumbing ---------------------------------------------------------
    def _document(self) -> Dict[str, Any]:
        document = self.store.get_state().get('currentList')
        if document is None:
            raise NoActiveListError("No packing list is loaded")
        return document

    def _commit(self, document: Dict[str, Any]) -> None:
        self.store.set_state({'currentList': document})

    def _update_ui(self, **changes) -> None:
        self.store.set_state(lambda state: {'ui': {**state['ui'], **changes}})

    # --- Trip -------------------------------------------------------------
    def set_trip(self, trip_data: Dict[str, Any]) -> None:
        document = self._document()
        if not is_valid_date_range(trip_data['departureDate'], trip_data['returnDate']):
            raise ValueError("Return date must be on or after the departure date")
        trip = Trip.from_dict(trip_data).to_dict()
        self._commit({**document, 'trip': trip})

    def update_trip_field(self, field: str, value: Any) -> None:
        '''Sets one trip field; changing either date recomputes calculatedDays.'''
        document = self._document()
        if field in ('departureDate', 'returnDate'):
            value = to_date_string(value)
        trip = {**(document.get('trip') or {}), field: value}
        if field in ('departureDate', 'returnDate') and trip.get('departureDate') and trip.get('returnDate'):
            trip['calculatedDays'] = calculate_days(trip['departureDate'], trip['returnDate'])
        self._commit({**document, 'trip': trip})

    # --- Bags -------------------------------------------------------------
    def add_bag(self, bag_data: Dict[str, Any]) -> str:
        document = self._document()
        bag = Bag.from_dict({**bag_data, 'id': None}).to_dict()
        self._commit({**document, 'bags': [*document.get('bags', []), bag]})
        return bag['id']

    def update_bag(self, bag_id: str, updates: Dict[str, Any]) -> None:
        document = self._document()
        _find(document['bags'], bag_id, 'Bag')
        changes = _clean(updates)
        self._commit({
            **document,
            'bags': [{**b, **changes} if b['id'] == bag_id else b for b in document['bags']],
        })

    def remove_bag(self, bag_id: str) -> None:
        """Delete a bag; categories and items pointing at it fall back to no bag."""
        document = self._document()
        _find(document['bags'], bag_id, 'Bag')
        self._commit({
            **document,
            'bags': [b for b in document['bags'] if b['id'] != bag_id],
            'categories': [
                {**c, 'defaultBagId': None} if c.get('defaultBagId') == bag_id else c
                for c in document['categories']
            ],
            'items': [
                {**i, 'bagId': None} if i.get('bagId') == bag_id else i
                for i in document['items']
            ],
        })

    # --- Categories -------------------------------------------------------
    def add_category(self, category_data: Dict[str, Any]) -> str:
        document = self._document()
        category = Category.from_dict({**category_data, 'id': None}).to_dict()
        self._commit({**document, 'categories': [*document.get('categories', []), category]})
        return category['id']

    def update_category(self, category_id: str, updates: Dict[str, Any]) -> None:
        document = self._document()
        _find(document['categories'], category_id, 'Category')
        changes = _clean(updates)
        self._commit({
            **document,
            'categories': [{**c, **changes} if c['id'] == category_id else c
                           for c in document['categories']],
        })

    def set_category_default_bag(self, category_id: str, bag_id: Optional[str]) -> None:
        self.update_category(category_id, {'defaultBagId': bag_id})

    def remove_category(self, category_id: str) -> None:
        """Delete a category together with the items it owns."""
        document = self._document()
        _find(document['categories'], category_id, 'Category')
        self._commit({
            **document,
            'categories': [c for c in document['categories'] if c['id'] != category_id],
            'items': [i for i in document['items'] if i.get('categoryId') != category_id],
        })

    # --- Items ------------------------------------------------------------
    def add_item(self, item_data: Dict[str, Any]) -> str:
        '''Adds an item at the end of its category.'''
        document = self._document()
        category_id = item_data.get('categoryId')
        _find(document['categories'], category_id, 'Category')
        order = sum(1 for i in document['items'] if i.get('categoryId') == category_id)
        item = Item.from_dict({**item_data, 'id': None, 'order': order, 'packed': False}).to_dict()
        self._commit({**document, 'items': [*document['items'], item]})
        return item['id']

    def update_item(self, item_id: str, updates: Dict[str, Any]) -> None:
        """Update item fields; category and order only change through move/reorder."""
        document = self._document()
        _find(document['items'], item_id, 'Item')
        changes = _clean(updates, 'categoryId', 'order')
        if 'quantityType' in changes and changes['quantityType'] not in QUANTITY_TYPES:
            raise ValueError(f"Unknown quantity type: {changes['quantityType']}")
        self._commit({
            **document,
            'items': [{**i, **changes} if i['id'] == item_id else i for i in document['items']],
        })

    def toggle_item_packed(self, item_id: str) -> None:
        document = self._document()
        _find(document['items'], item_id, 'Item')
        self._commit({
            **document,
            'items': [{**i, 'packed': not i.get('packed')} if i['id'] == item_id else i
                      for i in document['items']],
        })

    def set_all_packed(self, packed: bool) -> None:
        document = self._document()
        self._commit({**document, 'items': [{**i, 'packed': packed} for i in document['items']]})

    def move_item_to_bag(self, item_id: str, bag_id: Optional[str]) -> None:
        '''Pins an item to a bag; None falls back to the category default.'''
        if bag_id is not None:
            _find(self._document()['bags'], bag_id, 'Bag')
        self.update_item(item_id, {'bagId': bag_id})

    def move_item_to_category(self, item_id: str, category_id: str) -> bool:
        """Move an item to the end of another category."""
        document = self._document()
        item = _find(document['items'], item_id, 'Item')
        _find(document['categories'], category_id, 'Category')
        if item.get('categoryId') == category_id:
            return False
        order = sum(1 for i in document['items'] if i.get('categoryId') == category_id)
        items = [
            {**i, 'categoryId': category_id, 'order': order} if i['id'] == item_id else i
            for i in document['items']
        ]
        self._commit({**document, 'items': normalize_orders(items, 'categoryId')})
        return True

    def reorder_item(self, item_id: str, target_item_id: str, position: str) -> bool:
        '''Drops an item before/after another item, possibly in another category.

        Returns False (and commits nothing) for self drops or unknown ids.
        '''
        document = self._document()
        placements = plan_move(document['items'], item_id, target_item_id, position, 'categoryId')
        if placements is None:
            return False
        self._commit({**document, 'items': apply_placements(document['items'], placements)})
        return True

    def remove_item(self, item_id: str) -> None:
        document = self._document()
        _find(document['items'], item_id, 'Item')
        items = [i for i in document['items'] if i['id'] != item_id]
        self._commit({**document, 'items': normalize_orders(items, 'categoryId')})

    # --- Stages -----------------------------------------------------------
    def add_stage(self, stage_data: Dict[str, Any]) -> str:
        document = self._document()
        stages = document.get('stages') or []
        stage = Stage.from_dict({**stage_data, 'id': None, 'order': len(stages), 'tasks': []}).to_dict()
        self._commit({**document, 'stages': [*stages, stage]})
        return stage['id']

    def update_stage(self, stage_id: str, updates: Dict[str, Any]) -> None:
        document = self._document()
        stages = document.get('stages') or []
        _find(stages, stage_id, 'Stage')
        changes = _clean(updates, 'order', 'tasks')
        self._commit({
            **document,
            'stages': [{**s, **changes} if s['id'] == stage_id else s for s in stages],
        })

    def remove_stage(self, stage_id: str) -> None:
        document = self._document()
        stages = document.get('stages') or []
        _find(stages, stage_id, 'Stage')
        remaining = [s for s in stages if s['id'] != stage_id]
        self._commit({**document, 'stages': normalize_orders(remaining)})

    def reorder_stage(self, stage_id: str, target_stage_id: str, position: str) -> bool:
        document = self._document()
        stages = document.get('stages') or []
        placements = plan_move(stages, stage_id, target_stage_id, position)
        if placements is None:
            return False
        self._commit({**document, 'stages': apply_placements(stages, placements)})
        return True

    # --- Tasks ------------------------------------------------------------
    def _replace_tasks(self, document: Dict[str, Any], stage_id: str, tasks: List[Dict[str, Any]]) -> None:
        self._commit({
            **document,
            'stages': [{**s, 'tasks': tasks} if s['id'] == stage_id else s
                       for s in document.get('stages') or []],
        })

    def _stage_tasks(self, document: Dict[str, Any], stage_id: str) -> List[Dict[str, Any]]:
        return _find(document.get('stages') or [], stage_id, 'Stage').get('tasks') or []

    def add_task_to_stage(self, stage_id: str, description: str) -> str:
        document = self._document()
        tasks = self._stage_tasks(document, stage_id)
        task = Task(description=description, order=len(tasks), id=generate_short_id()).to_dict()
        self._replace_tasks(document, stage_id, [*tasks, task])
        return task['id']

    def update_task(self, stage_id: str, task_id: str, updates: Dict[str, Any]) -> None:
        document = self._document()
        tasks = self._stage_tasks(document, stage_id)
        _find(tasks, task_id, 'Task')
        changes = _clean(updates, 'order')
        self._replace_tasks(document, stage_id,
                            [{**t, **changes} if t['id'] == task_id else t for t in tasks])

    def toggle_task_completed(self, stage_id: str, task_id: str) -> None:
        document = self._document()
        tasks = self._stage_tasks(document, stage_id)
        _find(tasks, task_id, 'Task')
        self._replace_tasks(document, stage_id, [
            {**t, 'completed': not t.get('completed')} if t['id'] == task_id else t for t in tasks
        ])

    def remove_task(self, stage_id: str, task_id: str) -> None:
        document = self._document()
        tasks = self._stage_tasks(document, stage_id)
        _find(tasks, task_id, 'Task')
        self._replace_tasks(document, stage_id,
                            normalize_orders([t for t in tasks if t['id'] != task_id]))

    def reorder_task(self, stage_id: str, task_id: str, target_task_id: str, position: str) -> bool:
        document = self._document()
        stage = next((s for s in document.get('stages') or [] if s.get('id') == stage_id), None)
        if stage is None:
            return False
        tasks = stage.get('tasks') or []
        placements = plan_move(tasks, task_id, target_task_id, position)
        if placements is None:
            return False
        self._replace_tasks(document, stage_id, apply_placements(tasks, placements))
        return True

    # --- Whole list -------------------------------------------------------
    def load_list(self, list_data: Dict[str, Any]) -> None:
        '''Replaces the current list wholesale; orders are normalized on the way in.'''
        document = normalize_document({
            **list_data,
            **{key: list_data.get(key) or [] for key in ('bags', 'categories', 'items', 'stages')},
        })
        self.store.set_state({'currentList': document})

    def import_list(self, data: Any) -> None:
        """Validate and load an exported document; an invalid one leaves the store untouched."""
        valid, errors = validate_packing_list(data)
        if not valid:
            logger.warning("Rejected imported list: %s", "; ".join(errors))
            raise ImportValidationError(errors)
        self.load_list(data)
        logger.info("Imported list with %d items", len(data['items']))

    def clear_current_list(self) -> None:
        self.store.set_state({'currentList': None})

    def create_empty_list(self, trip_data: Dict[str, Any]) -> Dict[str, Any]:
        document = create_empty_list(trip_data)
        self.load_list(document)
        return self.store.get_state()['currentList']

    def create_from_template(self, template_id: Optional[str], trip_data: Dict[str, Any]) -> Dict[str, Any]:
        """Start a new list from a bundled template (or an empty list when template_id is None)."""
        if not template_id:
            return self.create_empty_list(trip_data)
        template = self.templates.load_template(template_id)
        self.load_list(create_from_template(template, trip_data, template_id))
        logger.info("Created list from template %s", template_id)
        return self.store.get_state()['currentList']

    def save_as_template(self, template_name: str, description: str = '') -> Dict[str, Any]:
        return build_template(self._document(), template_name, description)

    def set_templates(self, templates: List[Dict[str, Any]]) -> None:
        self.store.set_state({'templates': list(templates)})

    def get_template_list(self) -> List[Dict[str, Any]]:
        return self.templates.get_template_list()

    def load_templates(self) -> List[Dict[str, Any]]:
        '''Copies the manifest into the store; commits only when it differs from the stored list.'''
        templates = self.get_template_list()
        if templates != self.store.get_state().get('templates'):
            self.set_templates(templates)
        return templates

    def update_settings(self, updates: Dict[str, Any]) -> None:
        self.store.set_state(lambda state: {'settings': {**(state.get('settings') or {}), **updates}})

    # --- UI ---------------------------------------------------------------
    def navigate_to(self, view: str, subview: Optional[str] = None) -> None:
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view}")
        self._update_ui(currentView=view, currentSubview=subview)

    def show_modal(self, modal_config: Dict[str, Any]) -> None:
        self._update_ui(modal=modal_config)

    def hide_modal(self) -> None:
        self._update_ui(modal=None)

    def show_toast(self, message: str, toast_type: str = 'info') -> None:
        if toast_type not in TOAST_TYPES:
            raise ValueError(f"Unknown toast type: {toast_type}")
        self._update_ui(toast={'message': message, 'type': toast_type})

    def hide_toast(self) -> None:
        self._update_ui(toast=None)

    def set_loading(self, is_loading: bool) -> None:
        self._update_ui(isLoading=is_loading)

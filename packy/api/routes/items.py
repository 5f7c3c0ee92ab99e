from fastapi import APIRouter, Depends

from packy.api.dependencies import get_actions
from packy.state.actions import ListActions
from packy.state.selectors import get_items_by_category, get_unassigned_items
from packy.utilities.validators import (
    BagAssignment,
    CategoryAssignment,
    ItemInput,
    ItemUpdate,
    PackAllInput,
    ReorderInput,
)

router = APIRouter(prefix="/api/items")


@router.get("")
def items_by_category(actions: ListActions = Depends(get_actions)):
    """Items grouped by category id, each group in display order."""
    return {"categories": actions.store.select(get_items_by_category)}


@router.get("/unassigned")
def unassigned_items(actions: ListActions = Depends(get_actions)):
    items = actions.store.select(get_unassigned_items)
    return {"items": items, "count": len(items)}


@router.post("", status_code=201)
def add_item(payload: ItemInput, actions: ListActions = Depends(get_actions)):
    return {"id": actions.add_item(payload.to_fragment())}


@router.post("/pack-all")
def pack_all(payload: PackAllInput, actions: ListActions = Depends(get_actions)):
    actions.set_all_packed(payload.packed)
    return {"ok": True, "packed": payload.packed}


@router.patch("/{item_id}")
def update_item(item_id: str, payload: ItemUpdate, actions: ListActions = Depends(get_actions)):
    actions.update_item(item_id, payload.to_fragment())
    return {"ok": True}


@router.post("/{item_id}/toggle")
def toggle_packed(item_id: str, actions: ListActions = Depends(get_actions)):
    actions.toggle_item_packed(item_id)
    return {"ok": True}


@router.put("/{item_id}/bag")
def move_to_bag(item_id: str, payload: BagAssignment, actions: ListActions = Depends(get_actions)):
    actions.move_item_to_bag(item_id, payload.bag_id)
    return {"ok": True}


@router.put("/{item_id}/category")
def move_to_category(item_id: str, payload: CategoryAssignment, actions: ListActions = Depends(get_actions)):
    return {"moved": actions.move_item_to_category(item_id, payload.category_id)}


@router.post("/{item_id}/reorder")
def reorder_item(item_id: str, payload: ReorderInput, actions: ListActions = Depends(get_actions)):
    return {"moved": actions.reorder_item(item_id, payload.target_id, payload.position)}


@router.delete("/{item_id}")
def remove_item(item_id: str, actions: ListActions = Depends(get_actions)):
    actions.remove_item(item_id)
    return {"ok": True}

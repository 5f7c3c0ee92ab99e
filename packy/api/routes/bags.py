from fastapi import APIRouter, Depends

from packy.api.dependencies import get_actions
from packy.state.actions import ListActions
from packy.state.selectors import get_bag_summary, get_items_by_bag
from packy.utilities.validators import BagAssignment, BagInput, BagUpdate, CategoryInput, CategoryUpdate

router = APIRouter(prefix="/api")


# -------------------- Bags --------------------
@router.get("/bags")
def list_bags(actions: ListActions = Depends(get_actions)):
    return {"bags": actions.store.select(get_bag_summary)}


@router.post("/bags", status_code=201)
def add_bag(payload: BagInput, actions: ListActions = Depends(get_actions)):
    return {"id": actions.add_bag(payload.to_fragment())}


@router.get("/bags/{bag_id}/items")
def bag_items(bag_id: str, actions: ListActions = Depends(get_actions)):
    items = actions.store.select(lambda state: get_items_by_bag(state, bag_id))
    return {"bagId": bag_id, "items": items, "count": len(items)}


@router.patch("/bags/{bag_id}")
def update_bag(bag_id: str, payload: BagUpdate, actions: ListActions = Depends(get_actions)):
    actions.update_bag(bag_id, payload.to_fragment())
    return {"ok": True}


@router.delete("/bags/{bag_id}")
def remove_bag(bag_id: str, actions: ListActions = Depends(get_actions)):
    actions.remove_bag(bag_id)
    return {"ok": True}


# -------------------- Categories --------------------
@router.post("/categories", status_code=201)
def add_category(payload: CategoryInput, actions: ListActions = Depends(get_actions)):
    return {"id": actions.add_category(payload.to_fragment())}


@router.patch("/categories/{category_id}")
def update_category(category_id: str, payload: CategoryUpdate, actions: ListActions = Depends(get_actions)):
    actions.update_category(category_id, payload.to_fragment())
    return {"ok": True}


@router.put("/categories/{category_id}/default-bag")
def set_default_bag(category_id: str, payload: BagAssignment, actions: ListActions = Depends(get_actions)):
    actions.set_category_default_bag(category_id, payload.bag_id)
    return {"ok": True}


@router.delete("/categories/{category_id}")
def remove_category(category_id: str, actions: ListActions = Depends(get_actions)):
    actions.remove_category(category_id)
    return {"ok": True}

from fastapi import APIRouter, Depends

from packy.api.dependencies import get_actions
from packy.state.actions import ListActions
from packy.utilities.validators import ReorderInput, StageInput, TaskInput, TaskUpdate

router = APIRouter(prefix="/api/stages")


# -------------------- Stages --------------------
@router.post("", status_code=201)
def add_stage(payload: StageInput, actions: ListActions = Depends(get_actions)):
    return {"id": actions.add_stage(payload.to_fragment())}


@router.patch("/{stage_id}")
def update_stage(stage_id: str, payload: StageInput, actions: ListActions = Depends(get_actions)):
    actions.update_stage(stage_id, payload.to_fragment())
    return {"ok": True}


@router.post("/{stage_id}/reorder")
def reorder_stage(stage_id: str, payload: ReorderInput, actions: ListActions = Depends(get_actions)):
    return {"moved": actions.reorder_stage(stage_id, payload.target_id, payload.position)}


@router.delete("/{stage_id}")
def remove_stage(stage_id: str, actions: ListActions = Depends(get_actions)):
    actions.remove_stage(stage_id)
    return {"ok": True}


# -------------------- Tasks --------------------
@router.post("/{stage_id}/tasks", status_code=201)
def add_task(stage_id: str, payload: TaskInput, actions: ListActions = Depends(get_actions)):
    return {"id": actions.add_task_to_stage(stage_id, payload.description)}


@router.patch("/{stage_id}/tasks/{task_id}")
def update_task(stage_id: str, task_id: str, payload: TaskUpdate,
                actions: ListActions = Depends(get_actions)):
    actions.update_task(stage_id, task_id, payload.to_fragment())
    return {"ok": True}


@router.post("/{stage_id}/tasks/{task_id}/toggle")
def toggle_task(stage_id: str, task_id: str, actions: ListActions = Depends(get_actions)):
    actions.toggle_task_completed(stage_id, task_id)
    return {"ok": True}


@router.post("/{stage_id}/tasks/{task_id}/reorder")
def reorder_task(stage_id: str, task_id: str, payload: ReorderInput,
                 actions: ListActions = Depends(get_actions)):
    return {"moved": actions.reorder_task(stage_id, task_id, payload.target_id, payload.position)}


@router.delete("/{stage_id}/tasks/{task_id}")
def remove_task(stage_id: str, task_id: str, actions: ListActions = Depends(get_actions)):
    actions.remove_task(stage_id, task_id)
    return {"ok": True}

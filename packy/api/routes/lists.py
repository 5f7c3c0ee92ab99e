from typing import Any
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from packy.api.dependencies import get_actions
from packy.infra.pdf_utils import generate_pdf_for_list
from packy.state.actions import ListActions, NoActiveListError
from packy.state.selectors import get_current_list
from packy.utilities.constants import DEFAULT_LIST_NAME
from packy.utilities.dates import is_valid_date_string
from packy.utilities.export_import import generate_filename, slugify, template_filename
from packy.utilities.validators import SaveTemplateInput, TemplateCreateInput, TripFieldInput, TripInput

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


def _require_list(actions: ListActions):
    document = actions.store.select(get_current_list)
    if document is None:
        raise NoActiveListError("No packing list is loaded")
    return document


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


# -------------------- Templates --------------------
@router.get("/templates")
def list_templates(actions: ListActions = Depends(get_actions)):
    templates = actions.get_template_list()
    return {"templates": templates, "count": len(templates)}


# -------------------- Lists --------------------
@router.post("/lists", status_code=201)
def create_list(payload: TemplateCreateInput, actions: ListActions = Depends(get_actions)):
    """Start a list from a template, or an empty one when templateId is omitted."""
    document = actions.create_from_template(payload.template_id, payload.trip.to_fragment())
    logger.info(f"New list '{document['trip']['name']}' ({len(document['items'])} items)")
    return document


@router.get("/lists/current")
def get_list(actions: ListActions = Depends(get_actions)):
    return _require_list(actions)


@router.delete("/lists/current")
def clear_list(actions: ListActions = Depends(get_actions)):
    actions.clear_current_list()
    return {"ok": True}


@router.post("/lists/import")
def import_list(payload: Any = Body(...), actions: ListActions = Depends(get_actions)):
    actions.import_list(payload)
    return _require_list(actions)


@router.get("/lists/export")
def export_list(actions: ListActions = Depends(get_actions)):
    document = _require_list(actions)
    return JSONResponse(content=document, headers=_attachment(generate_filename(document.get("trip"))))


@router.get("/lists/export/pdf")
def export_list_pdf(actions: ListActions = Depends(get_actions)):
    document = _require_list(actions)
    pdf_bytes = generate_pdf_for_list(actions.store.get_state())
    name = slugify((document.get("trip") or {}).get("name") or "") or DEFAULT_LIST_NAME
    return Response(content=pdf_bytes, media_type="application/pdf",
                    headers=_attachment(f"packy-{name}.pdf"))


@router.post("/lists/save-template")
def save_as_template(payload: SaveTemplateInput, actions: ListActions = Depends(get_actions)):
    template = actions.save_as_template(payload.template_name, payload.description)
    return JSONResponse(content=template, headers=_attachment(template_filename(payload.template_name)))


# -------------------- Trip --------------------
@router.put("/trip")
def set_trip(payload: TripInput, actions: ListActions = Depends(get_actions)):
    actions.set_trip(payload.to_fragment())
    return _require_list(actions)["trip"]


@router.patch("/trip")
def update_trip_field(payload: TripFieldInput, actions: ListActions = Depends(get_actions)):
    if payload.field != "name" and not is_valid_date_string(payload.value):
        raise HTTPException(status_code=422, detail=f"Invalid date for {payload.field}: {payload.value}")
    actions.update_trip_field(payload.field, payload.value)
    return _require_list(actions)["trip"]

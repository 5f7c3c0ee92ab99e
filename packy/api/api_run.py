from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from pathlib import Path
from typing import Optional
import logging

from packy.api.dependencies import get_actions, get_feed, get_store
from packy.events.web_observers import ChangeFeed
from packy.infra.Template_Repository import TemplateNotFoundError, TemplateRepository
from packy.logic.ordering.reorder import sort_by_order
from packy.logic.quantity.expression import EXPRESSION_PARSER
from packy.state.State_Store import Store
from packy.state.actions import EntityNotFoundError, ListActions, NoActiveListError
from packy.state.selectors import (
    get_bag_summary,
    get_current_list,
    get_packing_progress,
    get_stage_progress,
    get_unassigned_items,
)
from packy.utilities.config import HISTORY_LIMIT
from packy.utilities.validators import ExpressionInput, ImportValidationError, NavigateInput, ToastInput

# Routers
from packy.api.routes import bags, items, lists, stages

# Logging
logger = logging.getLogger("packy_app")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NoActiveListError)
    def _no_list(request: Request, exc: NoActiveListError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(EntityNotFoundError)
    def _not_found(request: Request, exc: EntityNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc.args[0]) if exc.args else "Not found"})

    @app.exception_handler(TemplateNotFoundError)
    def _template_not_found(request: Request, exc: TemplateNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc.args[0]) if exc.args else "Not found"})

    @app.exception_handler(ImportValidationError)
    def _invalid_import(request: Request, exc: ImportValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})


def create_app(config_dir: Optional[Path] = None, history_limit: int = HISTORY_LIMIT) -> FastAPI:
    """One store per application; tests build their own app for isolation."""
    app = FastAPI(title="Packy Packing List API")

    store = Store(history_limit=history_limit)
    app.state.store = store
    app.state.templates = TemplateRepository(config_dir)
    app.state.actions = ListActions(store, app.state.templates)
    app.state.feed = ChangeFeed().start(store.events)
    logger.info("Packy store ready (history limit %d)", history_limit)

    _register_error_handlers(app)

    # Include routers
    app.include_router(lists.router)
    app.include_router(bags.router)
    app.include_router(items.router)
    app.include_router(stages.router)

    # -------------------- State --------------------
    @app.get("/api/state")
    def get_state(store: Store = Depends(get_store)):
        state = store.get_state()
        return {**state, "canUndo": store.can_undo(), "historySize": store.history_size}

    @app.post("/api/undo")
    def undo(store: Store = Depends(get_store)):
        undone = store.undo()
        if not undone:
            logger.info("Undo requested with empty history")
        return {"undone": undone, "canUndo": store.can_undo()}

    @app.get("/api/events")
    def events(since: Optional[int] = Query(default=None, ge=0), feed: ChangeFeed = Depends(get_feed)):
        """Poll recent store changes; pass next_cursor back as since."""
        return feed.get_events(since)

    # -------------------- Progress --------------------
    @app.get("/api/progress")
    def progress(store: Store = Depends(get_store)):
        state = store.get_state()
        document = get_current_list(state) or {}
        return {
            "packed": get_packing_progress(state),
            "stages": [
                {"stageId": s.get("id"), "name": s.get("name"), "progress": get_stage_progress(state, s.get("id"))}
                for s in sort_by_order(document.get("stages") or [])
            ],
            "bags": get_bag_summary(state),
            "unassigned": len(get_unassigned_items(state)),
        }

    # -------------------- Expressions --------------------
    @app.post("/api/expression/validate")
    def validate_expression(payload: ExpressionInput):
        result = EXPRESSION_PARSER.validate(payload.expression)
        result["description"] = EXPRESSION_PARSER.describe(payload.expression)
        if result["valid"]:
            result["quantity"] = EXPRESSION_PARSER.evaluate(payload.expression, payload.days)
            result["example"] = EXPRESSION_PARSER.get_example(payload.expression or "", payload.days)
        return result

    # -------------------- UI --------------------
    @app.post("/api/ui/navigate")
    def navigate(payload: NavigateInput, actions: ListActions = Depends(get_actions)):
        actions.navigate_to(payload.view, payload.subview)
        return actions.store.get_state()["ui"]

    @app.post("/api/ui/toast")
    def toast(payload: ToastInput, actions: ListActions = Depends(get_actions)):
        actions.show_toast(payload.message, payload.type)
        return actions.store.get_state()["ui"]

    @app.delete("/api/ui/toast")
    def hide_toast(actions: ListActions = Depends(get_actions)):
        actions.hide_toast()
        return actions.store.get_state()["ui"]

    return app


app = create_app()

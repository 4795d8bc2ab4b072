"""FastAPI routes for the student performance dashboard.

- Roster listing for the selection control
- Stateless view derivation from a posted ViewState
- In-memory dashboard sessions driven by UI events
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.core.logging import get_logger, LogTimer
from app.domain.columns import UnknownColumnError
from app.domain.student import DashboardView, RecordSet, StudentRecord, ViewState
from app.infrastructure.data_loader import load_records
from app.services.dashboard import DashboardController
from app.services.sessions import SessionNotFoundError, SessionRegistry

logger = get_logger(__name__)
router = APIRouter()


def get_records() -> RecordSet:
    """Dependency returning the roster loaded at startup."""
    return load_records()


_registry = SessionRegistry(get_records)


def get_registry() -> SessionRegistry:
    """Dependency returning the process-wide session registry."""
    return _registry


def _get_controller(registry: SessionRegistry, session_id: str) -> DashboardController:
    try:
        return registry.get(session_id)
    except SessionNotFoundError as e:
        logger.warning(str(e), extra={"session_id": session_id})
        raise HTTPException(status_code=404, detail=str(e))


# -----------------
# REQUEST MODELS
# -----------------

class SelectionRequest(BaseModel):
    student_id: Optional[str] = ""


class SearchRequest(BaseModel):
    text: str = ""


class SortRequest(BaseModel):
    field: str


class SessionResponse(BaseModel):
    session_id: str
    view: DashboardView


# -----------------
# ROSTER
# -----------------

@router.get("/students", response_model=List[StudentRecord])
async def students(records: RecordSet = Depends(get_records)):
    """Return the full roster, in file order."""
    return list(records)


@router.post("/view", response_model=DashboardView)
async def derive_view(state: ViewState, records: RecordSet = Depends(get_records)):
    """Derive every dashboard view for a posted state without keeping a session.

    Example:
        POST /view
        {"selected_id": "", "search_text": "bob", "sort_field": "name", "sort_order": "asc"}
    """
    with LogTimer(logger, "derive_view"):
        return DashboardController(records, state=state).view()


# -----------------
# SESSIONS
# -----------------

@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(registry: SessionRegistry = Depends(get_registry)):
    """Start a dashboard session with default view state."""
    session_id = registry.create()
    return SessionResponse(session_id=session_id, view=registry.get(session_id).view())


@router.get("/sessions/{session_id}", response_model=DashboardView)
async def session_view(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Return the session's current dashboard view."""
    return _get_controller(registry, session_id).view()


@router.put("/sessions/{session_id}/selection", response_model=DashboardView)
async def set_selection(
    session_id: str,
    req: SelectionRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    """Select one student, or everyone with an empty id."""
    controller = _get_controller(registry, session_id)
    controller.set_selected_student_id(req.student_id)
    return controller.view()


@router.put("/sessions/{session_id}/search", response_model=DashboardView)
async def set_search(
    session_id: str,
    req: SearchRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    """Filter table rows by name or persona."""
    controller = _get_controller(registry, session_id)
    controller.set_search_text(req.text)
    return controller.view()


@router.post("/sessions/{session_id}/sort", response_model=DashboardView)
async def click_header(
    session_id: str,
    req: SortRequest,
    registry: SessionRegistry = Depends(get_registry),
):
    """Apply a table header click to the session's sort state."""
    controller = _get_controller(registry, session_id)
    try:
        controller.on_header_click(req.field)
    except UnknownColumnError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return controller.view()


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    """End a dashboard session."""
    if not registry.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"deleted": session_id}

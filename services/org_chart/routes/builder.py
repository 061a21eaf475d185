"""
Chart Builder Routes
====================

API endpoints driving interactive builder sessions: palette drops,
connections, drag-end repositioning, hierarchy arrangement, import and
export. Every action response carries the chart and the notices it raised.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from shared.config import settings
from shared.logging import bind_context, get_logger
from shared.models.organization import Organization

from services.org_chart.builder.notices import Notice
from services.org_chart.builder.session import ChartBuilder, DropEvent
from services.org_chart.builder.store import (
    BuilderSessionStore,
    SessionNotFoundError,
    get_session_store,
)
from services.org_chart.graph.schema import (
    ChartDocument,
    ChartEdge,
    ChartMode,
    ChartNode,
    Connection,
    Position,
)


logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================


class CreateSessionRequest(BaseModel):
    """Optional organizations to seed a new session with."""

    organizations: list[Organization] | None = None


class SessionResponse(BaseModel):
    """State of a builder session."""

    session_id: str
    mode: ChartMode
    chart: ChartDocument
    notices: list[Notice] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Result of a builder action."""

    chart: ChartDocument
    notices: list[Notice] = Field(default_factory=list)
    node: ChartNode | None = None
    edge: ChartEdge | None = None
    moved: list[str] | None = None
    unmatched: list[str] | None = None


def _get_builder(session_id: str, store: BuilderSessionStore) -> ChartBuilder:
    bind_context(session_id=session_id)
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Builder session {session_id} not found",
        )


def _action_response(builder: ChartBuilder, **extra: object) -> ActionResponse:
    return ActionResponse(
        chart=builder.session.snapshot(),
        notices=builder.board.drain(),
        **extra,
    )


# =============================================================================
# Session Routes
# =============================================================================


@router.post(
    "/sessions",
    response_model=SessionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    request: CreateSessionRequest | None = None,
    store: BuilderSessionStore = Depends(get_session_store),
) -> SessionResponse:
    """
    Open a builder session.

    When organizations are posted, the session starts from their laid-out
    chart; otherwise it starts empty.
    """
    session_id, builder = store.create()
    if request is not None and request.organizations:
        builder.load_organizations(request.organizations)

    return SessionResponse(
        session_id=session_id,
        mode=builder.session.mode,
        chart=builder.session.snapshot(),
        notices=builder.board.drain(),
    )


@router.get("/sessions/{session_id}", response_model=SessionResponse, response_model_exclude_none=True)
async def get_session(
    session_id: str,
    store: BuilderSessionStore = Depends(get_session_store),
) -> SessionResponse:
    """Get the current chart of a session."""
    builder = _get_builder(session_id, store)
    return SessionResponse(
        session_id=session_id,
        mode=builder.session.mode,
        chart=builder.session.snapshot(),
    )


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str,
    store: BuilderSessionStore = Depends(get_session_store),
) -> Response:
    """Close a session and discard its chart."""
    try:
        store.delete(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Builder session {session_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Action Routes
# =============================================================================


@router.post("/sessions/{session_id}/drop", response_model=ActionResponse, response_model_exclude_none=True)
async def drop_organization(
    session_id: str,
    event: DropEvent,
    store: BuilderSessionStore = Depends(get_session_store),
) -> ActionResponse:
    """Place a palette organization at the drop coordinates."""
    builder = _get_builder(session_id, store)
    node = builder.drop(event)
    return _action_response(builder, node=node)


@router.post(
    "/sessions/{session_id}/connections",
    response_model=ActionResponse,
    response_model_exclude_none=True,
)
async def add_connection(
    session_id: str,
    connection: Connection,
    store: BuilderSessionStore = Depends(get_session_store),
) -> ActionResponse:
    """Connect two nodes. Duplicates are rejected with a notice."""
    builder = _get_builder(session_id, store)
    edge = builder.connect(connection)
    return _action_response(builder, edge=edge)


@router.put(
    "/sessions/{session_id}/nodes/{node_id}/position",
    response_model=ActionResponse,
    response_model_exclude_none=True,
)
async def commit_node_position(
    session_id: str,
    node_id: str,
    position: Position,
    store: BuilderSessionStore = Depends(get_session_store),
) -> ActionResponse:
    """Commit the drag-end position of a node."""
    builder = _get_builder(session_id, store)
    if not builder.commit_drag_end(node_id, position):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Node {node_id} not found",
        )
    return _action_response(builder, moved=[node_id])


@router.post("/sessions/{session_id}/arrange", response_model=ActionResponse, response_model_exclude_none=True)
async def arrange_hierarchy(
    session_id: str,
    store: BuilderSessionStore = Depends(get_session_store),
) -> ActionResponse:
    """Arrange the session's nodes by hierarchy level."""
    builder = _get_builder(session_id, store)
    result = builder.arrange_hierarchy()
    if result is None:
        return _action_response(builder)
    return _action_response(
        builder,
        moved=list(result.positions),
        unmatched=result.unmatched,
    )


@router.post("/sessions/{session_id}/import", response_model=ActionResponse, response_model_exclude_none=True)
async def import_chart(
    session_id: str,
    request: Request,
    store: BuilderSessionStore = Depends(get_session_store),
) -> ActionResponse:
    """Replace the session's chart with an exported chart document."""
    builder = _get_builder(session_id, store)
    builder.import_json(await request.body())
    return _action_response(builder)


@router.get("/sessions/{session_id}/export/json")
async def export_session_json(
    session_id: str,
    store: BuilderSessionStore = Depends(get_session_store),
) -> Response:
    """Download the session's chart as JSON."""
    builder = _get_builder(session_id, store)
    text = builder.export_json()
    builder.board.drain()
    if text is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export chart as JSON",
        )
    return Response(
        content=text,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{settings.export.json_filename}"'},
    )


@router.get("/sessions/{session_id}/export/png")
async def export_session_png(
    session_id: str,
    store: BuilderSessionStore = Depends(get_session_store),
) -> Response:
    """Download the session's chart as PNG."""
    builder = _get_builder(session_id, store)
    data = await builder.export_png()
    builder.board.drain()
    if data is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to export chart as PNG",
        )

    logger.info("session_png_exported", session_id=session_id, size=len(data))
    return Response(
        content=data,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{settings.export.png_filename}"'},
    )

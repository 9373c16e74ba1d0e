"""
Relationship graph routes.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from doctriage.config import get_settings
from doctriage.graph.network import build_relationship_graph, graph_statistics, hub_documents
from doctriage.graph.render import edge_style, edge_width, node_style
from doctriage.graph.surfaces import CLICK_EVENT
from doctriage.models.api import (
    GraphLayoutResponse,
    GraphStatsResponse,
    HitRequest,
    HitResponse,
    LayoutEdgeResponse,
    LayoutNodeResponse,
)
from doctriage.services.document_store import DocumentStore, get_document_store
from doctriage.services.graph_session import GraphSession, get_graph_session

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/layout", response_model=GraphLayoutResponse)
async def get_graph_layout(
    width: float | None = Query(default=None, gt=0),
    height: float | None = Query(default=None, gt=0),
    session: GraphSession = Depends(get_graph_session),
) -> GraphLayoutResponse:
    """
    Lay out the relationship graph for a viewport.

    Later hit requests are resolved against this layout.
    """
    settings = get_settings()
    result = session.refresh(
        width or settings.viewport_width,
        height or settings.viewport_height,
    )
    nodes, edges = session.view.nodes, session.view.edges

    node_items = []
    for node in nodes:
        position = result.positions.get(node.id)
        if position is None:
            continue
        style = node_style(node)
        node_items.append(LayoutNodeResponse(
            id=node.id,
            label=node.label,
            x=position.x,
            y=position.y,
            radius=style.radius,
            fill=style.fill.css(),
            glyph=node.category.glyph,
            is_current=node.is_current,
        ))

    edge_items = []
    for edge in edges:
        if edge.source_id not in result.positions or edge.target_id not in result.positions:
            continue
        style = edge_style(edge.relationship_type)
        edge_items.append(LayoutEdgeResponse(
            source_id=edge.source_id,
            target_id=edge.target_id,
            relationship_type=edge.relationship_type,
            strength=edge.strength,
            color=style.color.css(),
            width=edge_width(edge.strength),
            dash=list(style.dash) if style.dash else None,
        ))

    return GraphLayoutResponse(
        width=result.width,
        height=result.height,
        focus_id=result.focus_id,
        nodes=node_items,
        edges=edge_items,
    )


@router.post("/hit", response_model=HitResponse)
async def hit_graph(
    request: HitRequest,
    session: GraphSession = Depends(get_graph_session),
) -> HitResponse:
    """
    Resolve a click or pointer move against the last layout.

    A click on a document opens it for review.
    """
    if session.result is None:
        raise HTTPException(status_code=409, detail="Graph has not been laid out")

    if request.event == CLICK_EVENT:
        document_id = session.click(request.x, request.y)
        return HitResponse(
            event=request.event,
            document_id=document_id,
            selected=document_id is not None,
            cursor=session.surface.cursor,
        )

    hover = session.hover(request.x, request.y)
    return HitResponse(
        event=request.event,
        document_id=hover.node_id,
        tooltip=hover.tooltip_text,
        cursor=hover.cursor,
    )


@router.get("/image.png")
async def get_graph_image(
    session: GraphSession = Depends(get_graph_session),
) -> Response:
    """
    Render the last layout as a PNG image.
    """
    try:
        image = session.render_image("png")
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return Response(content=image, media_type="image/png")


@router.get("/stats", response_model=GraphStatsResponse)
async def get_graph_statistics(
    top_n: int = Query(default=5, ge=1, le=50),
    store: DocumentStore = Depends(get_document_store),
) -> GraphStatsResponse:
    """
    Get relationship graph statistics.
    """
    graph = build_relationship_graph((d.id for d in store.documents), store.relationships)
    stats = graph_statistics(graph)

    return GraphStatsResponse(
        **stats,
        hubs=[
            {"document_id": doc_id, "centrality": score}
            for doc_id, score in hub_documents(graph, top_n=top_n)
        ],
    )

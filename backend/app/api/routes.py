"""REST API routes."""
import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..engine.editor import (
    DuplicateConnection, EdgeNotFound, EditorError, NodeNotFound, PipelineEditor,
    create_editor, get_editor, remove_editor,
)
from ..engine.graph import Edge, Graph, Node, NodeType
from ..engine.layout import LayoutConfig, NodePosition, compute_layout
from ..engine.validator import validate
from ..models.schemas import (
    ConnectRequest, CreateNodeRequest, EdgeSchema, EditorStateResponse,
    GraphSchema, LayoutConfigSchema, LayoutRequest, LayoutResponse,
    MoveNodeRequest, NodePositionSchema, NodeSchema, ValidationResponse,
)
from .websocket import manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _schema_to_graph(schema: GraphSchema) -> Graph:
    nodes = tuple(
        Node(id=n.id, name=n.name, node_type=n.node_type, x=n.x, y=n.y)
        for n in schema.nodes
    )
    edges = tuple(
        Edge(id=e.id, source=e.source, target=e.target) for e in schema.edges
    )
    return Graph(nodes=nodes, edges=edges)


def _layout_config(schema: LayoutConfigSchema | None) -> LayoutConfig:
    """Settings defaults, overridden by any fields set on the request."""
    config = settings.layout_config()
    if schema is None:
        return config
    overrides = schema.model_dump(exclude_none=True)
    return LayoutConfig(**{**asdict(config), **overrides})


def _layout_response(layout: dict[str, NodePosition]) -> LayoutResponse:
    return LayoutResponse(positions={
        node_id: NodePositionSchema(**asdict(pos)) for node_id, pos in layout.items()
    })


def _editor_state(editor: PipelineEditor) -> EditorStateResponse:
    result = editor.validation()
    return EditorStateResponse(
        editor_id=editor.editor_id,
        nodes=[
            NodeSchema(id=n.id, name=n.name, node_type=n.node_type, x=n.x, y=n.y)
            for n in editor.nodes
        ],
        edges=[EdgeSchema(id=e.id, source=e.source, target=e.target) for e in editor.edges],
        validation=ValidationResponse(is_valid=result.is_valid, errors=result.errors),
    )


def _require_editor(editor_id: str) -> PipelineEditor:
    editor = get_editor(editor_id)
    if not editor:
        raise HTTPException(status_code=404, detail="Editor not found")
    return editor


def _raise_http(err: EditorError):
    if isinstance(err, (NodeNotFound, EdgeNotFound)):
        raise HTTPException(status_code=404, detail=str(err))
    if isinstance(err, DuplicateConnection):
        raise HTTPException(status_code=409, detail=str(err))
    raise HTTPException(status_code=400, detail=str(err))


async def _publish_validation(editor: PipelineEditor) -> EditorStateResponse:
    """Push the refreshed validation status to listeners and return the state."""
    await manager.broadcast_validation(editor.editor_id, editor.validation())
    return _editor_state(editor)


@router.post("/validate", response_model=ValidationResponse)
async def validate_snapshot(graph: GraphSchema):
    snapshot = _schema_to_graph(graph)
    result = validate(snapshot.nodes, snapshot.edges)
    return ValidationResponse(is_valid=result.is_valid, errors=result.errors)


@router.post("/layout", response_model=LayoutResponse)
async def layout_snapshot(request: LayoutRequest):
    snapshot = _schema_to_graph(request.graph)
    layout = compute_layout(snapshot.nodes, snapshot.edges, _layout_config(request.config))
    return _layout_response(layout)


@router.get("/node-types")
async def list_node_types():
    return [t.value for t in NodeType]


@router.post("/editors", response_model=EditorStateResponse)
async def new_editor():
    editor = create_editor()
    logger.info("created editor %s", editor.editor_id)
    return _editor_state(editor)


@router.get("/editors/{editor_id}", response_model=EditorStateResponse)
async def get_editor_state(editor_id: str):
    return _editor_state(_require_editor(editor_id))


@router.delete("/editors/{editor_id}")
async def delete_editor(editor_id: str):
    _require_editor(editor_id)
    remove_editor(editor_id)
    logger.info("removed editor %s", editor_id)
    return {"status": "deleted"}


@router.get("/editors/{editor_id}/validation", response_model=ValidationResponse)
async def get_editor_validation(editor_id: str):
    result = _require_editor(editor_id).validation()
    return ValidationResponse(is_valid=result.is_valid, errors=result.errors)


@router.post("/editors/{editor_id}/nodes", response_model=EditorStateResponse)
async def add_node(editor_id: str, request: CreateNodeRequest):
    editor = _require_editor(editor_id)
    try:
        editor.add_node(request.name, request.node_type)
    except EditorError as e:
        _raise_http(e)
    return await _publish_validation(editor)


@router.delete("/editors/{editor_id}/nodes/{node_id}", response_model=EditorStateResponse)
async def remove_node(editor_id: str, node_id: str):
    editor = _require_editor(editor_id)
    try:
        editor.remove_node(node_id)
    except EditorError as e:
        _raise_http(e)
    return await _publish_validation(editor)


@router.put("/editors/{editor_id}/nodes/{node_id}/position", response_model=EditorStateResponse)
async def move_node(editor_id: str, node_id: str, request: MoveNodeRequest):
    editor = _require_editor(editor_id)
    try:
        editor.move_node(node_id, request.x, request.y)
    except EditorError as e:
        _raise_http(e)
    return _editor_state(editor)


@router.post("/editors/{editor_id}/edges", response_model=EditorStateResponse)
async def connect_nodes(editor_id: str, request: ConnectRequest):
    editor = _require_editor(editor_id)
    try:
        editor.connect(request.source, request.target)
    except EditorError as e:
        _raise_http(e)
    return await _publish_validation(editor)


@router.delete("/editors/{editor_id}/edges/{edge_id}", response_model=EditorStateResponse)
async def remove_edge(editor_id: str, edge_id: str):
    editor = _require_editor(editor_id)
    try:
        editor.remove_edge(edge_id)
    except EditorError as e:
        _raise_http(e)
    return await _publish_validation(editor)


@router.post("/editors/{editor_id}/layout", response_model=LayoutResponse)
async def layout_editor(editor_id: str, config: LayoutConfigSchema | None = None):
    editor = _require_editor(editor_id)
    layout = editor.auto_layout(_layout_config(config))
    await manager.broadcast_layout(editor_id, layout)
    return _layout_response(layout)

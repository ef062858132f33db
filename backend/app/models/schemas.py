"""Pydantic schemas for API request/response models."""
from pydantic import BaseModel, ConfigDict, Field

from ..engine.graph import NodeType


class EdgeSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str = Field(alias="from")
    target: str = Field(alias="to")


class NodeSchema(BaseModel):
    id: str
    name: str
    node_type: NodeType = NodeType.TRANSFORM
    x: float = 0.0
    y: float = 0.0


class GraphSchema(BaseModel):
    nodes: list[NodeSchema] = []
    edges: list[EdgeSchema] = []


class LayoutConfigSchema(BaseModel):
    node_width: float | None = None
    layer_height: float | None = None
    canvas_width: float | None = None
    origin_x: float | None = None
    origin_y: float | None = None


class LayoutRequest(BaseModel):
    graph: GraphSchema
    config: LayoutConfigSchema | None = None


class NodePositionSchema(BaseModel):
    layer: int
    slot: int
    x: float
    y: float


class LayoutResponse(BaseModel):
    positions: dict[str, NodePositionSchema]


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str] = []


class CreateNodeRequest(BaseModel):
    name: str
    node_type: NodeType | None = None


class ConnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from")
    target: str = Field(alias="to")


class MoveNodeRequest(BaseModel):
    x: float
    y: float


class EditorStateResponse(BaseModel):
    editor_id: str
    nodes: list[NodeSchema]
    edges: list[EdgeSchema]
    validation: ValidationResponse

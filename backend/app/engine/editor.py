"""Editor sessions: own the mutable node/edge collection and call the core."""
import logging
import uuid
from dataclasses import asdict, replace
from typing import Any

from .graph import Edge, Graph, Node, NodeType
from .layout import LayoutConfig, NodePosition, apply_layout, compute_layout
from .validator import ValidationResult, validate

logger = logging.getLogger(__name__)

_TYPE_CYCLE = (NodeType.SOURCE, NodeType.TRANSFORM, NodeType.SINK)


class EditorError(Exception):
    pass


class NodeNotFound(EditorError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class EdgeNotFound(EditorError):
    def __init__(self, edge_id: str):
        self.edge_id = edge_id
        super().__init__(f"Edge not found: {edge_id}")


class InvalidNodeName(EditorError):
    pass


class InvalidConnection(EditorError):
    pass


class DuplicateConnection(EditorError):
    def __init__(self, source: str, target: str):
        super().__init__(f"Connection already exists between {source} and {target}")


def generate_id() -> str:
    return uuid.uuid4().hex[:9]


class PipelineEditor:
    """Mutable pipeline graph. The validator and layout engine only ever see
    snapshots taken from it."""

    def __init__(self, editor_id: str):
        self.editor_id = editor_id
        self._nodes: list[Node] = []
        self._edges: list[Edge] = []

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    def get_node(self, node_id: str) -> Node:
        for node in self._nodes:
            if node.id == node_id:
                return node
        raise NodeNotFound(node_id)

    def add_node(self, name: str, node_type: NodeType | None = None) -> Node:
        name = (name or "").strip()
        if not name:
            raise InvalidNodeName("Node name must not be empty")

        count = len(self._nodes)
        node = Node(
            id=generate_id(),
            name=name,
            node_type=node_type or _TYPE_CYCLE[count % len(_TYPE_CYCLE)],
            x=100 + (count * 150) % 600,
            y=100 + (count // 4) * 120,
        )
        self._nodes.append(node)
        logger.info("editor %s: added node %s (%s)", self.editor_id, node.id, node.name)
        return node

    def connect(self, source: str, target: str) -> Edge:
        self.get_node(source)
        self.get_node(target)
        if source == target:
            raise InvalidConnection("Cannot connect a node to itself")

        # A connection and its reverse count as the same connection
        for edge in self._edges:
            if {edge.source, edge.target} == {source, target}:
                raise DuplicateConnection(source, target)

        edge = Edge(id=generate_id(), source=source, target=target)
        self._edges.append(edge)
        logger.info("editor %s: connected %s -> %s", self.editor_id, source, target)
        return edge

    def remove_node(self, node_id: str) -> None:
        self.get_node(node_id)
        self._nodes = [n for n in self._nodes if n.id != node_id]
        self._edges = [
            e for e in self._edges if e.source != node_id and e.target != node_id
        ]
        logger.info("editor %s: removed node %s", self.editor_id, node_id)

    def remove_edge(self, edge_id: str) -> None:
        remaining = [e for e in self._edges if e.id != edge_id]
        if len(remaining) == len(self._edges):
            raise EdgeNotFound(edge_id)
        self._edges = remaining
        logger.info("editor %s: removed edge %s", self.editor_id, edge_id)

    def move_node(self, node_id: str, x: float, y: float) -> Node:
        node = self.get_node(node_id)
        node.x = max(0.0, x)
        node.y = max(0.0, y)
        return node

    def snapshot(self) -> Graph:
        return Graph(
            nodes=tuple(replace(n) for n in self._nodes),
            edges=tuple(replace(e) for e in self._edges),
        )

    def validation(self) -> ValidationResult:
        graph = self.snapshot()
        return validate(graph.nodes, graph.edges)

    def auto_layout(self, config: LayoutConfig | None = None) -> dict[str, NodePosition]:
        """Lay out the current graph and write the coordinates back."""
        if not self._nodes:
            return {}
        graph = self.snapshot()
        layout = compute_layout(graph.nodes, graph.edges, config)
        self._nodes = apply_layout(self._nodes, layout)
        logger.debug("editor %s: layout applied to %d nodes", self.editor_id, len(layout))
        return layout

    def to_dict(self) -> dict[str, Any]:
        """Nodes, edges and current validation, as shown in the JSON preview."""
        return {
            "nodes": [
                {**asdict(n), "node_type": n.node_type.value} for n in self._nodes
            ],
            "edges": [
                {"id": e.id, "from": e.source, "to": e.target} for e in self._edges
            ],
            "validation": asdict(self.validation()),
        }


_editors: dict[str, PipelineEditor] = {}


def create_editor(editor_id: str | None = None) -> PipelineEditor:
    editor = PipelineEditor(editor_id or str(uuid.uuid4()))
    _editors[editor.editor_id] = editor
    return editor


def get_editor(editor_id: str) -> PipelineEditor | None:
    return _editors.get(editor_id)


def remove_editor(editor_id: str) -> None:
    _editors.pop(editor_id, None)

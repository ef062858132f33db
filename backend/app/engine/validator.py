"""Graph validation: minimum size, connectivity, cycle detection."""
from dataclasses import dataclass, field
from typing import Iterable

from .graph import Edge, GraphIndex, Node

MIN_NODES = 2

MIN_NODES_MESSAGE = f"Pipeline must have at least {MIN_NODES} nodes"
UNCONNECTED_MESSAGE = "Unconnected nodes: {names}"
CYCLE_MESSAGE = "Pipeline contains cycles (not a valid DAG)"


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate(nodes: Iterable[Node], edges: Iterable[Edge]) -> ValidationResult:
    """Validate a pipeline snapshot.

    Every check runs and reports independently, in a fixed order:
    minimum size, unconnected nodes, cycles.
    """
    index = GraphIndex.build(nodes, edges)
    errors: list[str] = []
    errors.extend(_check_size(index))
    errors.extend(_check_connectivity(index))
    errors.extend(_check_cycles(index))
    return ValidationResult(
        is_valid=not errors and len(index.nodes) >= MIN_NODES,
        errors=errors,
    )


def _check_size(index: GraphIndex) -> list[str]:
    if len(index.nodes) < MIN_NODES:
        return [MIN_NODES_MESSAGE]
    return []


def _check_connectivity(index: GraphIndex) -> list[str]:
    connected = index.connected_ids()
    unconnected = [n.name for n in index.nodes if n.id not in connected]
    if unconnected:
        return [UNCONNECTED_MESSAGE.format(names=", ".join(unconnected))]
    return []


def _check_cycles(index: GraphIndex) -> list[str]:
    if has_cycle(index):
        return [CYCLE_MESSAGE]
    return []


def has_cycle(index: GraphIndex) -> bool:
    """DFS with a visited set and a separate on-stack set.

    Uses an explicit stack of (node_id, next_edge_position) frames instead of
    recursion. A node is put on the stack before its outgoing edges are
    scanned, so a self-loop is seen as a back-edge.
    """
    visited: set[str] = set()
    on_stack: set[str] = set()

    for root in index.nodes:
        if root.id in visited:
            continue
        visited.add(root.id)
        on_stack.add(root.id)
        stack: list[tuple[str, int]] = [(root.id, 0)]

        while stack:
            node_id, pos = stack[-1]
            outgoing = index.get_outgoing_edges(node_id)
            if pos >= len(outgoing):
                stack.pop()
                on_stack.discard(node_id)
                continue

            stack[-1] = (node_id, pos + 1)
            succ = outgoing[pos].target
            if succ in on_stack:
                return True
            if succ not in visited:
                visited.add(succ)
                on_stack.add(succ)
                stack.append((succ, 0))

    return False

"""WebSocket fan-out of editor status: validation verdicts and applied layouts."""
import json
import logging
from typing import Any

from fastapi import WebSocket

from ..engine.layout import NodePosition
from ..engine.validator import ValidationResult

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks status listeners per editor and pushes events to them."""

    def __init__(self):
        self._listeners: dict[str, list[WebSocket]] = {}

    async def connect(self, editor_id: str, websocket: WebSocket):
        await websocket.accept()
        self._listeners.setdefault(editor_id, []).append(websocket)
        logger.debug("editor %s: status listener attached", editor_id)

    def disconnect(self, editor_id: str, websocket: WebSocket):
        listeners = [ws for ws in self._listeners.get(editor_id, []) if ws is not websocket]
        if listeners:
            self._listeners[editor_id] = listeners
        else:
            self._listeners.pop(editor_id, None)

    def listener_count(self, editor_id: str) -> int:
        return len(self._listeners.get(editor_id, []))

    async def broadcast_validation(self, editor_id: str, result: ValidationResult):
        """Refresh status indicators after a graph mutation."""
        await self._broadcast(editor_id, {
            "type": "validation",
            "editor_id": editor_id,
            "is_valid": result.is_valid,
            "errors": list(result.errors),
        })

    async def broadcast_layout(self, editor_id: str, layout: dict[str, NodePosition]):
        await self._broadcast(editor_id, {
            "type": "layout_applied",
            "editor_id": editor_id,
            "positions": {
                node_id: {"layer": p.layer, "slot": p.slot, "x": p.x, "y": p.y}
                for node_id, p in layout.items()
            },
        })

    async def _broadcast(self, editor_id: str, event: dict[str, Any]):
        listeners = self._listeners.get(editor_id)
        if not listeners:
            return
        message = json.dumps(event)
        for ws in list(listeners):
            try:
                await ws.send_text(message)
            except Exception:
                # Closed sockets are pruned; the event is not retried
                logger.debug("editor %s: dropping closed status listener", editor_id)
                self.disconnect(editor_id, ws)


manager = ConnectionManager()

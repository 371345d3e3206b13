"""WebSocket push channel for the staff and admin screens.

Clients subscribe to one channel per collection at ``/ws/{channel}``. Every
mutating route publishes ``{"type", "action", "data"}`` on the matching
channel once the response is ready. Polling keeps working without it.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import WebSocket, status
from pydantic import BaseModel

logger = logging.getLogger(__name__)

CHANNELS = (
    "menu",
    "orders",
    "tables",
    "service-requests",
    "billing-requests",
    "reservations",
    "feedback",
)


class ConnectionManager:
    """Manages WebSocket connections per channel."""

    MAX_CONNECTIONS_PER_CHANNEL = 1000

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}
        self.connection_metadata: Dict[int, Dict[str, Any]] = {}

    async def connect(self, websocket: WebSocket, channel: str) -> bool:
        """Accept a WebSocket onto a channel. Returns False if it was rejected."""
        if channel not in CHANNELS:
            logger.warning(f"WebSocket connection rejected: unknown channel '{channel}'")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return False
        if len(self.active_connections.get(channel, [])) >= self.MAX_CONNECTIONS_PER_CHANNEL:
            logger.warning(f"WebSocket connection rejected: channel '{channel}' at capacity")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return False

        await websocket.accept()
        self.active_connections.setdefault(channel, []).append(websocket)
        self.connection_metadata[id(websocket)] = {
            "connected_at": datetime.now(timezone.utc),
            "channel": channel,
            "last_ping": datetime.now(timezone.utc),
        }
        logger.debug(f"WebSocket connected to channel '{channel}'")
        return True

    def disconnect(self, websocket: WebSocket, channel: str):
        connections = self.active_connections.get(channel, [])
        if websocket in connections:
            connections.remove(websocket)
        self.connection_metadata.pop(id(websocket), None)
        logger.debug(f"WebSocket disconnected from channel '{channel}'")

    def update_ping(self, websocket: WebSocket):
        meta = self.connection_metadata.get(id(websocket))
        if meta:
            meta["last_ping"] = datetime.now(timezone.utc)

    async def broadcast(self, message: Dict[str, Any], channel: str):
        """Send a message to every connection on a channel, dropping dead ones."""
        disconnected = []
        for connection in list(self.active_connections.get(channel, [])):
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.debug(f"WebSocket send failed: {e}")
                disconnected.append(connection)

        for conn in disconnected:
            self.disconnect(conn, channel)

    def get_connection_count(self, channel: Optional[str] = None) -> int:
        if channel:
            return len(self.active_connections.get(channel, []))
        return sum(len(conns) for conns in self.active_connections.values())


# Global connection manager instance
ws_manager = ConnectionManager()


def to_payload(data: Any) -> Any:
    """JSON-ready camelCase form of a response model (or list of them)."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [to_payload(item) for item in data]
    return data


async def publish(channel: str, action: str, data: Any):
    """Broadcast a change event. Runs as a background task after the response."""
    message = {"type": channel, "action": action, "data": to_payload(data)}
    try:
        await ws_manager.broadcast(message, channel)
    except Exception as e:
        logger.warning(f"WebSocket broadcast error on '{channel}': {e}")

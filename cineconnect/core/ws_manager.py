"""WebSocket connection manager for group chat channels."""

import json
import logging
from typing import Any

from fastapi import WebSocket
from starlette.requests import HTTPConnection

logger = logging.getLogger(__name__)


def group_channel(group_id: int) -> str:
    return f"group-{group_id}"


class ChannelManager:
    """Tracks active WebSocket connections by user and by subscribed channel.

    Delivery is fire-and-forget: a socket that fails a send is dropped and
    misses the event.
    """

    def __init__(self) -> None:
        # user_id -> set of active websocket connections
        self._connections: dict[int, set[WebSocket]] = {}
        # channel name -> subscribed websockets
        self._channels: dict[str, set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: int) -> None:
        await websocket.accept()
        self._connections.setdefault(user_id, set()).add(websocket)
        logger.info("WS connected: user=%s (total=%s)", user_id, self.total_connections)

    def disconnect(self, websocket: WebSocket, user_id: int) -> None:
        conns = self._connections.get(user_id)
        if conns:
            conns.discard(websocket)
            if not conns:
                del self._connections[user_id]
        for channel in list(self._channels):
            self._unsubscribe(websocket, channel)
        logger.info("WS disconnected: user=%s (total=%s)", user_id, self.total_connections)

    def join(self, websocket: WebSocket, channel: str) -> None:
        self._channels.setdefault(channel, set()).add(websocket)
        logger.info("WS joined channel %s (subscribers=%s)", channel, self.subscriber_count(channel))

    def leave(self, websocket: WebSocket, channel: str) -> None:
        self._unsubscribe(websocket, channel)
        logger.info("WS left channel %s", channel)

    def is_subscribed(self, websocket: WebSocket, channel: str) -> bool:
        return websocket in self._channels.get(channel, set())

    def subscriber_count(self, channel: str) -> int:
        return len(self._channels.get(channel, set()))

    async def unsubscribe_user(self, user_id: int, channel: str) -> None:
        """Drop every socket of user_id from channel (the user lost access)."""
        for ws in list(self._connections.get(user_id, set())):
            self._unsubscribe(ws, channel)
        logger.info("WS user=%s removed from channel %s", user_id, channel)

    async def retain_users(self, channel: str, user_ids: set[int]) -> None:
        """Keep only sockets belonging to user_ids subscribed to channel."""
        allowed = {ws for uid in user_ids for ws in self._connections.get(uid, set())}
        dropped = [ws for ws in self._channels.get(channel, set()) if ws not in allowed]
        for ws in dropped:
            self._unsubscribe(ws, channel)
        if dropped:
            logger.info("WS dropped %s subscriber(s) from channel %s", len(dropped), channel)

    def _unsubscribe(self, websocket: WebSocket, channel: str) -> None:
        subs = self._channels.get(channel)
        if subs is None:
            return
        subs.discard(websocket)
        if not subs:
            del self._channels[channel]

    async def _send(self, targets: list[WebSocket], payload: str) -> list[WebSocket]:
        dead: list[WebSocket] = []
        for ws in targets:
            try:
                await ws.send_text(payload)
            except Exception:
                logger.warning("WS send failed, dropping socket", exc_info=True)
                dead.append(ws)
        return dead

    async def publish(self, channel: str, event: str, data: Any) -> None:
        """Send event to every socket subscribed to channel."""
        payload = json.dumps({"event": event, "data": data}, default=str)
        for ws in await self._send(list(self._channels.get(channel, set())), payload):
            self._unsubscribe(ws, channel)

    async def send_to_user(self, user_id: int, event: str, data: Any) -> None:
        """Send event to all connections for a user."""
        conns = self._connections.get(user_id, set())
        payload = json.dumps({"event": event, "data": data}, default=str)
        for ws in await self._send(list(conns), payload):
            conns.discard(ws)

    async def close_all(self) -> None:
        """Close every open socket; used at shutdown."""
        sockets = [ws for conns in self._connections.values() for ws in conns]
        for ws in sockets:
            try:
                await ws.close(code=1001)
            except Exception:
                logger.debug("WS already closed during shutdown", exc_info=True)
        self._connections.clear()
        self._channels.clear()
        logger.info("Closed %s websocket(s)", len(sockets))

    @property
    def total_connections(self) -> int:
        return sum(len(c) for c in self._connections.values())


def get_channel_manager(connection: HTTPConnection) -> ChannelManager:
    """Dependency returning the process-wide channel manager."""
    return connection.app.state.channels

"""WebSocket endpoint for group chat, with JWT auth."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from cineconnect.core.deps import user_from_token
from cineconnect.core.errors import NotFoundError
from cineconnect.core.ws_manager import ChannelManager, group_channel
from cineconnect.services.group_service import can_view, get_group_or_404

logger = logging.getLogger(__name__)

router = APIRouter()


def _authenticate_ws(websocket: WebSocket, token: str) -> int | None:
    """Validate JWT and return user_id, or None."""
    with websocket.app.state.database.session() as db:
        user = user_from_token(db, token)
        return user.id if user else None


def _may_join(websocket: WebSocket, group_id: int, user_id: int) -> bool:
    with websocket.app.state.database.session() as db:
        try:
            group = get_group_or_404(db, group_id)
        except NotFoundError:
            return False
        return can_view(db, group, user_id)


def _parse_frame(raw: str) -> tuple[str | None, object]:
    try:
        frame = json.loads(raw)
    except ValueError:
        return None, None
    if not isinstance(frame, dict):
        return None, None
    return frame.get("event"), frame.get("data")


def _group_id(data: object) -> int | None:
    if isinstance(data, dict):
        data = data.get("group_id")
    try:
        return int(data)
    except (TypeError, ValueError):
        return None


async def _send(websocket: WebSocket, event: str, data: object = None) -> None:
    await websocket.send_text(json.dumps({"event": event, "data": data}))


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint. Client connects with ?token=<jwt>.
    Client events: join-group, leave-group (data: group id).
    Server pushes events: joined-group, left-group, new-message, notification, error
    """
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=4001, reason="Missing token")
        return

    user_id = _authenticate_ws(websocket, token)
    if user_id is None:
        await websocket.close(code=4003, reason="Invalid or expired token")
        return

    channels: ChannelManager = websocket.app.state.channels
    await channels.connect(websocket, user_id)
    try:
        while True:
            raw = await websocket.receive_text()
            # Heartbeat
            if raw == "ping":
                await websocket.send_text('{"event":"pong"}')
                continue

            event, data = _parse_frame(raw)
            group_id = _group_id(data)
            if event not in ("join-group", "leave-group"):
                await _send(websocket, "error", {"detail": "Unknown event"})
            elif group_id is None:
                await _send(websocket, "error", {"detail": "A group id is required"})
            elif event == "join-group":
                if await run_in_threadpool(_may_join, websocket, group_id, user_id):
                    channels.join(websocket, group_channel(group_id))
                    await _send(websocket, "joined-group", {"group_id": group_id})
                else:
                    await _send(websocket, "error", {"detail": "Cannot join this group", "group_id": group_id})
            else:
                channels.leave(websocket, group_channel(group_id))
                await _send(websocket, "left-group", {"group_id": group_id})
    except WebSocketDisconnect:
        pass
    finally:
        channels.disconnect(websocket, user_id)

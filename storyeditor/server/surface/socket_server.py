"""
Socket.IO server for frame surfaces.

Uses python-socketio in ASGI mode so it can wrap FastAPI.
`create_socket_app(fastapi_app)` returns the composite ASGI application to
pass to uvicorn.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

import socketio

from .surface_emitter import global_surface

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Socket.IO instance (async, ASGI mode)
# ---------------------------------------------------------------------------

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    logger=False,
    engineio_logger=False,
)

# sid -> frame the client joined
_client_frames: Dict[str, str] = {}


# ---------------------------------------------------------------------------
# Surface fan-out: wire global_surface → Socket.IO emit
# ---------------------------------------------------------------------------

def _on_surface(event: Dict[str, Any]) -> None:
    """
    Called synchronously by SurfaceEmitter.fire().
    We schedule an async emit on the running event loop.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return  # no loop: nothing is connected to receive it
    loop.create_task(sio.emit("surface", event, room=event.get("frameId")))


global_surface.on_event(_on_surface)


# ---------------------------------------------------------------------------
# Socket.IO lifecycle events
# ---------------------------------------------------------------------------

@sio.event
async def connect(sid: str, environ: dict) -> None:  # noqa: D401
    pass  # clients join a frame room explicitly


@sio.event
async def join_frame(sid: str, data: Dict[str, Any]) -> None:
    frame_id = data.get("frameId")
    if frame_id:
        await sio.enter_room(sid, frame_id)
        _client_frames[sid] = frame_id


@sio.event
async def block_mounted(sid: str, data: Dict[str, Any]) -> None:
    """The browser finished attaching a block and reports its anchor ids."""
    frame_id = data.get("frameId", "")
    block_id = str(data.get("blockId", ""))
    global_surface.acknowledge_mount(
        frame_id,
        block_id,
        data.get("sources") or {},
        data.get("targets") or {},
    )


@sio.event
async def disconnect(sid: str) -> None:
    """
    Release the pending mounts of the client's frame so a running load stops
    waiting for it. Other frames, and frames another client still shows, are
    left alone.
    """
    frame_id = _client_frames.pop(sid, None)
    if frame_id is None or frame_id in _client_frames.values():
        return
    abandoned = global_surface.abandon_pending(frame_id)
    if abandoned:
        logger.info(f"Client {sid} left frame '{frame_id}'; abandoned {abandoned} pending mount(s)")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_socket_app(fastapi_app: Any) -> socketio.ASGIApp:
    """Wrap *fastapi_app* inside a Socket.IO ASGI application."""
    return socketio.ASGIApp(sio, other_asgi_app=fastapi_app)

"""
Story editor REST routes.

All routes are mounted under /api by main.py.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from storyeditor.core.GraphSession import GraphSession
from storyeditor.core.Types import BlockType
from storyeditor.server.serializers.snapshot_serializer import (
    deserialize_snapshot, serialize_block, serialize_edge, serialize_forms, serialize_snapshot,
)
from storyeditor.server.state import EditorState, editor_state

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_frame(frame_id: str) -> GraphSession:
    session = editor_state.get_frame(frame_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Frame not found")
    return session


# ── Request bodies ────────────────────────────────────────────────────────────

class PositionBody(BaseModel):
    x: float = 0
    y: float = 0


class BlockBody(BaseModel):
    id: Union[str, int]
    type: str
    message: str = ""
    position: Optional[PositionBody] = None


class ConnectionBody(BaseModel):
    sourceId: str
    targetId: str


class StoryBody(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""


class SnapshotBody(BaseModel):
    story: Optional[StoryBody] = None
    blocks: List[BlockBody] = []
    connections: List[ConnectionBody] = []


class NewBlockBody(BaseModel):
    type: str


class MountAckBody(BaseModel):
    sources: Dict[str, Any] = {}
    targets: Dict[str, Any] = {}


# ── GET /block-types ──────────────────────────────────────────────────────────

@router.get("/block-types")
async def get_block_types() -> List[str]:
    return [t.value for t in BlockType]


# ── GET /frames ───────────────────────────────────────────────────────────────

@router.get("/frames")
async def list_frames() -> List[Dict[str, Any]]:
    return [
        {"id": frame_id, "status": session.status.name, "blocks": len(session.blocks)}
        for frame_id, session in editor_state.frames.items()
    ]


# ── POST /frames/:id/init ─────────────────────────────────────────────────────
# Without a body the frame is loaded with the demo story.

@router.post("/frames/{frame_id}/init")
async def init_frame(frame_id: str, body: Optional[SnapshotBody] = None) -> Dict[str, Any]:
    try:
        if body is None:
            snapshot = EditorState.demo_snapshot()
        else:
            snapshot = deserialize_snapshot(body.model_dump(exclude_none=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    session = editor_state.get_or_create_frame(frame_id)
    await session.init(snapshot)

    report = session.last_report
    logger.info(f"Frame '{frame_id}' loaded story '{snapshot.story.id}': "
                f"{len(snapshot.blocks)} block(s), {report.materialized} connection(s) drawn")
    return {
        "status": session.status.name,
        "materialized": report.materialized,
        "unresolved": [{"sourceId": c.source_id, "targetId": c.target_id} for c in report.unresolved],
    }


# ── GET /frames/:id/state ─────────────────────────────────────────────────────

@router.get("/frames/{frame_id}/state")
async def get_frame_state(frame_id: str) -> Dict[str, Any]:
    session = _require_frame(frame_id)
    if session.state is None:
        raise HTTPException(status_code=404, detail="Frame has not been loaded")
    return serialize_snapshot(session.state)


# ── GET /frames/:id/blocks ────────────────────────────────────────────────────

@router.get("/frames/{frame_id}/blocks")
async def get_frame_blocks(frame_id: str) -> List[Dict[str, Any]]:
    session = _require_frame(frame_id)
    return serialize_forms(session.updated_blocks)


# ── POST /frames/:id/blocks ───────────────────────────────────────────────────

@router.post("/frames/{frame_id}/blocks", status_code=201)
async def create_block(frame_id: str, body: NewBlockBody) -> Dict[str, Any]:
    session = editor_state.get_or_create_frame(frame_id)
    try:
        handle = session.new_block(body.type)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    block = session.store.get_block(handle.block_id)
    return serialize_block(block)


# ── GET /frames/:id/connections ───────────────────────────────────────────────

@router.get("/frames/{frame_id}/connections")
async def get_frame_connections(frame_id: str) -> List[Dict[str, Any]]:
    session = _require_frame(frame_id)
    return [serialize_edge(e) for e in session.connections]


# ── POST /frames/:id/mounts/:blockId ──────────────────────────────────────────
# HTTP alternative to the `block_mounted` socket event.

@router.post("/frames/{frame_id}/mounts/{block_id}", status_code=204)
async def acknowledge_mount(frame_id: str, block_id: str, body: MountAckBody) -> Response:
    if not editor_state.emitter.acknowledge_mount(frame_id, block_id, body.sources, body.targets):
        raise HTTPException(status_code=404, detail="No pending mount for block")
    return Response(status_code=204)

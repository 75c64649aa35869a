"""
Snapshot serializer.

Converts GraphSnapshot / Block / Connection objects to and from the JSON-safe
camelCase dicts the editor UI sends and expects.
"""
from __future__ import annotations

from typing import Any, Dict, List

from storyeditor.core.GraphPrimitives import (
    Block, BlockFormArray, Connection, EdgeSpec, GraphSnapshot, Position, Story,
)
from storyeditor.core.Types import BlockType

# ── Wire shapes (dicts, not TypedDicts, for easy JSON serialisation) ──────────

# SerializedStory keys: id, name, description
# SerializedBlock keys: id, type, message, position{x, y}
# SerializedConnection keys: sourceId, targetId
# SerializedSnapshot keys: story, blocks, connections
# SerializedEdge keys: source, target, anchors, endpoints


# ── Serialise ─────────────────────────────────────────────────────────────────

def serialize_block(block: Block) -> Dict[str, Any]:
    return {
        "id": block.id,
        "type": block.type.value,
        "message": block.message,
        "position": block.position.to_dict(),
    }


def serialize_connection(connection: Connection) -> Dict[str, str]:
    return {"sourceId": connection.source_id, "targetId": connection.target_id}


def serialize_snapshot(snapshot: GraphSnapshot) -> Dict[str, Any]:
    story = snapshot.story
    return {
        "story": {"id": story.id, "name": story.name, "description": story.description},
        "blocks": [serialize_block(b) for b in snapshot.blocks],
        "connections": [serialize_connection(c) for c in snapshot.connections],
    }


def _element_id(element: Any) -> Any:
    return getattr(element, "id", element)


def serialize_edge(edge: Any) -> Dict[str, Any]:
    """Materialized edge as reported by a rendering surface."""
    if isinstance(edge, EdgeSpec):
        return {
            "source": _element_id(edge.source),
            "target": _element_id(edge.target),
            "anchors": list(edge.anchors),
            "endpoints": list(edge.endpoints),
        }
    return dict(edge)


def serialize_forms(forms: BlockFormArray) -> List[Dict[str, Any]]:
    return forms.value


# ── Deserialise ───────────────────────────────────────────────────────────────

def deserialize_block(data: Dict[str, Any]) -> Block:
    try:
        block_id = data["id"]
        block_type = data["type"]
    except KeyError as exc:
        raise ValueError(f"Block is missing required field {exc}") from None

    pos = data.get("position") or {}
    return Block(
        id=str(block_id),
        type=BlockType.parse(block_type),
        message=data.get("message", ""),
        position=Position(float(pos.get("x", 0)), float(pos.get("y", 0))),
    )


def deserialize_connection(data: Dict[str, Any]) -> Connection:
    try:
        return Connection(str(data["sourceId"]), str(data["targetId"]))
    except KeyError as exc:
        raise ValueError(f"Connection is missing required field {exc}") from None


def deserialize_snapshot(data: Dict[str, Any]) -> GraphSnapshot:
    story = data.get("story") or {}
    return GraphSnapshot(
        story=Story(
            id=str(story.get("id", "")),
            name=story.get("name", ""),
            description=story.get("description", ""),
        ),
        blocks=[deserialize_block(b) for b in data.get("blocks", [])],
        connections=[deserialize_connection(c) for c in data.get("connections", [])],
    )

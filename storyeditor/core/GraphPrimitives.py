from typing import Any, Dict, List, NamedTuple, Optional, Tuple
from dataclasses import dataclass, field

from .Types import BlockType, AnchorSide, EndpointShape


@dataclass
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


# Base record for everything drawn on a frame. Mutated only through GraphSession.
@dataclass
class Block:
    id: str
    type: BlockType
    message: str = ""
    position: Position = field(default_factory=Position)

    def __repr__(self):
        return f"Block({self.id}:{self.type.value})"


# Defining Connection as a simple value type, hashable so reports can be compared.
# source_id / target_id are anchor ids handed out by the rendering surface,
# not necessarily Block.id values.
class Connection(NamedTuple):
    source_id: str
    target_id: str

    def __repr__(self):
        return f"Connection({self.source_id} -> {self.target_id})"


@dataclass
class Story:
    id: str = ""
    name: str = ""
    description: str = ""


@dataclass
class GraphSnapshot:
    """
    Full saved state of one editing surface: story metadata, blocks and
    connections. Sessions hold on to the snapshot they were loaded from; it is
    never recomputed from live edits.
    """
    story: Story = field(default_factory=Story)
    blocks: List[Block] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)


@dataclass
class AnchorSet:
    """
    Connectable elements of one mounted block.

    sources: output-port anchors a connection can start from.
    targets: block cards a connection can end on.
    Values are whatever element handle the rendering surface understands.
    """
    sources: Dict[str, Any] = field(default_factory=dict)
    targets: Dict[str, Any] = field(default_factory=dict)


class EdgeSpec(NamedTuple):
    source: Any
    target: Any
    anchors: Tuple[str, str] = (AnchorSide.RIGHT.value, AnchorSide.LEFT.value)
    endpoints: Tuple[str, str] = (EndpointShape.DOT.value, EndpointShape.RECTANGLE.value)


@dataclass
class ConnectReport:
    materialized: int = 0
    unresolved: List[Connection] = field(default_factory=list)

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved)


class BlockFormArray:
    """
    Editable per-block form entries, one per mounted block, in mount order.
    Block factories upsert an entry when they mount a block, so a re-mount
    replaces the earlier entry. The frame's owner reads them back through
    GraphSession.updated_blocks.
    """
    def __init__(self):
        self.controls: List[Dict[str, Any]] = []

    def upsert(self, entry: Dict[str, Any]) -> None:
        """Replace the entry with the same id, or append if there is none."""
        for i, existing in enumerate(self.controls):
            if existing.get("id") == entry.get("id"):
                self.controls[i] = entry
                return
        self.controls.append(entry)

    def find(self, block_id: str) -> Optional[Dict[str, Any]]:
        for entry in self.controls:
            if entry.get("id") == block_id:
                return entry
        return None

    @property
    def value(self) -> List[Dict[str, Any]]:
        return [dict(entry) for entry in self.controls]

    def __len__(self):
        return len(self.controls)

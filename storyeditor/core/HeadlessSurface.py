"""
In-process implementations of the frame collaborators.

Nothing is painted: the surface records what it was asked to do, and the
factory produces AnchorSets straight from the block data. Useful for tests and
for scripts that drive a GraphSession without a browser attached.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .GraphPrimitives import AnchorSet, Block, BlockFormArray, EdgeSpec
from .Interface import IBlockFactory, IContainer, IRenderingSurface
from .MountHandle import MountHandle


class HeadlessElement:
    """Stand-in for a mounted DOM element: an id and the block it belongs to."""

    def __init__(self, element_id: str, block_id: str, role: str) -> None:
        self.id = element_id
        self.block_id = block_id
        self.role = role

    def __repr__(self):
        return f"HeadlessElement({self.role}:{self.id})"


class HeadlessRenderingSurface(IRenderingSurface):
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.edges: List[EdgeSpec] = []
        self.suspended = False
        self.repaint_count = 0

    def reset(self) -> None:
        self.calls.append(("reset", None))
        self.edges.clear()

    def suspend_drawing(self, suspended: bool, repaint_now: bool = False) -> None:
        self.calls.append(("suspend_drawing", (suspended, repaint_now)))
        self.suspended = suspended
        if not suspended and repaint_now:
            self.repaint_count += 1

    def connect(self, edge: EdgeSpec) -> EdgeSpec:
        self.calls.append(("connect", edge))
        self.edges.append(edge)
        return edge

    def get_connections(self) -> List[EdgeSpec]:
        return list(self.edges)

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]


class HeadlessContainer(IContainer):
    def __init__(self) -> None:
        self.children: List[Any] = []
        self.clear_count = 0

    def clear(self) -> None:
        self.children.clear()
        self.clear_count += 1

    def attach(self, child: Any) -> None:
        self.children.append(child)


class HeadlessBlockFactory(IBlockFactory):
    """
    Mounts blocks without a UI.

    Every block gets a target anchor named after its id. Source anchors default
    to the block id as well; pass anchor_ids to name the output ports instead.

    deferred: block ids whose mounts stay pending until complete() is called.
    failing:  block ids whose mounts never complete (a broken visual).
    """

    def __init__(self,
                 anchor_ids: Optional[Callable[[Block], Iterable[str]]] = None,
                 deferred: Iterable[str] = (),
                 failing: Iterable[str] = ()) -> None:
        self.anchor_ids = anchor_ids
        self.deferred = set(deferred)
        self.failing = set(failing)
        self.mounted: List[str] = []
        self._waiting: Dict[str, List[Tuple[MountHandle, AnchorSet]]] = {}

    def anchors_for(self, block: Block) -> AnchorSet:
        source_ids = list(self.anchor_ids(block)) if self.anchor_ids else [block.id]
        return AnchorSet(
            sources={sid: HeadlessElement(sid, block.id, "source") for sid in source_ids},
            targets={block.id: HeadlessElement(block.id, block.id, "target")},
        )

    def mount(self,
              block: Block,
              surface: IRenderingSurface,
              container: IContainer,
              forms: BlockFormArray) -> MountHandle:
        handle = MountHandle(block.id, representation=block)
        self.mounted.append(block.id)
        forms.upsert({
            "id": block.id,
            "type": block.type.value,
            "message": block.message,
            "position": block.position.to_dict(),
        })
        if isinstance(container, HeadlessContainer):
            container.attach(block)

        if block.id in self.failing:
            return handle
        anchors = self.anchors_for(block)
        if block.id in self.deferred:
            self._waiting.setdefault(block.id, []).append((handle, anchors))
            return handle

        handle.resolve(anchors)
        return handle

    def complete(self, block_id: str) -> int:
        """Resolve the deferred mounts of *block_id*. Returns how many were resolved."""
        waiting = self._waiting.pop(block_id, [])
        for handle, anchors in waiting:
            handle.resolve(anchors)
        return len(waiting)

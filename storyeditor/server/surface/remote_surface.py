"""
Frame collaborators backed by a browser.

Each call on the surface, container or factory becomes one surface event for
the frame; the browser performs the actual drawing. Mounts complete when the
browser acknowledges them with the block's anchor element ids (see
SurfaceEmitter.acknowledge_mount).
"""
from __future__ import annotations

from typing import Any, Dict, List

from storyeditor.core.GraphPrimitives import Block, BlockFormArray, EdgeSpec
from storyeditor.core.Interface import IBlockFactory, IContainer, IRenderingSurface
from storyeditor.core.MountHandle import MountHandle
from storyeditor.server.serializers.snapshot_serializer import serialize_block

from .surface_emitter import SurfaceEmitter, global_surface
from .surface_types import (
    ConnectEvent, ContainerClearEvent, MountBlockEvent, SurfaceResetEvent, SurfaceSuspendEvent,
)


class RemoteRenderingSurface(IRenderingSurface):
    def __init__(self, frame_id: str, emitter: SurfaceEmitter = global_surface) -> None:
        self.frame_id = frame_id
        self.emitter = emitter
        # Edges the browser has been told to draw since the last reset
        self._edges: List[EdgeSpec] = []

    def reset(self) -> None:
        self._edges.clear()
        # Mounts from the previous load of this frame will never be acknowledged now
        self.emitter.abandon_pending(self.frame_id)
        event: SurfaceResetEvent = {"type": "SURFACE_RESET", "frameId": self.frame_id}
        self.emitter.fire(event)

    def suspend_drawing(self, suspended: bool, repaint_now: bool = False) -> None:
        event: SurfaceSuspendEvent = {
            "type": "SURFACE_SUSPEND",
            "frameId": self.frame_id,
            "suspended": suspended,
            "repaintNow": repaint_now,
        }
        self.emitter.fire(event)

    def connect(self, edge: EdgeSpec) -> EdgeSpec:
        self._edges.append(edge)
        event: ConnectEvent = {
            "type": "CONNECT",
            "frameId": self.frame_id,
            "source": edge.source,
            "target": edge.target,
            "anchors": list(edge.anchors),
            "endpoints": list(edge.endpoints),
        }
        self.emitter.fire(event)
        return edge

    def get_connections(self) -> List[EdgeSpec]:
        return list(self._edges)


class RemoteContainer(IContainer):
    def __init__(self, frame_id: str, emitter: SurfaceEmitter = global_surface) -> None:
        self.frame_id = frame_id
        self.emitter = emitter

    def clear(self) -> None:
        event: ContainerClearEvent = {"type": "CONTAINER_CLEAR", "frameId": self.frame_id}
        self.emitter.fire(event)


class RemoteBlockFactory(IBlockFactory):
    def __init__(self, frame_id: str, emitter: SurfaceEmitter = global_surface) -> None:
        self.frame_id = frame_id
        self.emitter = emitter

    def mount(self,
              block: Block,
              surface: IRenderingSurface,
              container: IContainer,
              forms: BlockFormArray) -> MountHandle:
        payload: Dict[str, Any] = serialize_block(block)
        handle = MountHandle(block.id, representation=payload)
        forms.upsert(dict(payload))

        # Register before firing so an immediate acknowledgement finds the handle
        self.emitter.expect_mount(self.frame_id, handle)
        event: MountBlockEvent = {"type": "MOUNT_BLOCK", "frameId": self.frame_id, "block": payload}
        self.emitter.fire(event)
        return handle

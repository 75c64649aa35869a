"""
Surface event type definitions. These are the draw commands sent to the
browser that hosts a frame's visuals. All events are plain dicts so they can be
emitted over Socket.IO without Pydantic overhead.
"""
from typing import Any, Dict, List, Literal, Union, TypedDict


# Filled in by SurfaceEmitter.fire()
class _Stamped(TypedDict, total=False):
    ts: int


class ContainerClearEvent(_Stamped):
    type: Literal["CONTAINER_CLEAR"]
    frameId: str


class SurfaceResetEvent(_Stamped):
    type: Literal["SURFACE_RESET"]
    frameId: str


class SurfaceSuspendEvent(_Stamped):
    type: Literal["SURFACE_SUSPEND"]
    frameId: str
    suspended: bool
    repaintNow: bool


class MountBlockEvent(_Stamped):
    type: Literal["MOUNT_BLOCK"]
    frameId: str
    block: Dict[str, Any]


class ConnectEvent(_Stamped):
    type: Literal["CONNECT"]
    frameId: str
    source: str
    target: str
    anchors: List[str]
    endpoints: List[str]


SurfaceEvent = Union[
    ContainerClearEvent,
    SurfaceResetEvent,
    SurfaceSuspendEvent,
    MountBlockEvent,
    ConnectEvent,
]

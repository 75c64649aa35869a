"""
SurfaceEmitter — bridge between frame sessions and the browser drawing them.

Manages two concerns:
1. Fan-out of surface events to registered listeners (sockets, loggers, etc.)
2. Mount acknowledgements: every MOUNT_BLOCK event leaves a MountHandle
   pending until the browser reports the block's anchors back through
   `acknowledge_mount()`.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from storyeditor.core.GraphPrimitives import AnchorSet
from storyeditor.core.MountHandle import MountHandle

from .surface_types import SurfaceEvent

logger = logging.getLogger(__name__)


class MountAbandoned(RuntimeError):
    """The surface went away before the browser acknowledged a mount."""


class SurfaceEmitter:
    def __init__(self) -> None:
        self._listeners: List[Callable[[SurfaceEvent], None]] = []
        self._pending: Dict[Tuple[str, str], MountHandle] = {}

    # ------------------------------------------------------------------
    # Listener registration
    # ------------------------------------------------------------------

    def on_event(self, callback: Callable[[SurfaceEvent], None]) -> None:
        """Register a callback that receives every emitted surface event."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[SurfaceEvent], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # Emit
    # ------------------------------------------------------------------

    def fire(self, payload: SurfaceEvent) -> None:
        """Stamp the payload with a millisecond timestamp and broadcast it."""
        if "ts" not in payload:
            payload["ts"] = _now_ms()
        for cb in self._listeners:
            try:
                cb(payload)
            except Exception:
                # never let a listener break a frame load
                logger.exception(f"Surface listener failed on {payload.get('type')}")

    # ------------------------------------------------------------------
    # Mount acknowledgements
    # ------------------------------------------------------------------

    def expect_mount(self, frame_id: str, handle: MountHandle) -> None:
        key = (frame_id, handle.block_id)
        previous = self._pending.get(key)
        if previous is not None and not previous.done():
            previous.fail(MountAbandoned(f"Block '{handle.block_id}' was mounted again"))
        self._pending[key] = handle

    def acknowledge_mount(self,
                          frame_id: str,
                          block_id: str,
                          sources: Dict[str, Any],
                          targets: Dict[str, Any]) -> bool:
        """Resolve the pending mount of *block_id*. Returns False if none was pending."""
        handle = self._pending.pop((frame_id, block_id), None)
        if handle is None:
            logger.debug(f"No pending mount for block '{block_id}' on frame '{frame_id}'")
            return False
        handle.resolve(AnchorSet(sources=dict(sources), targets=dict(targets)))
        return True

    def pending_mounts(self, frame_id: Optional[str] = None) -> List[MountHandle]:
        return [h for (fid, _), h in self._pending.items() if frame_id is None or fid == frame_id]

    def abandon_pending(self, frame_id: Optional[str] = None) -> int:
        """Fail outstanding mounts so waiting loads stop early."""
        keys = [k for k in self._pending if frame_id is None or k[0] == frame_id]
        for key in keys:
            self._pending.pop(key).fail(MountAbandoned(f"Mount of block '{key[1]}' abandoned"))
        return len(keys)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

global_surface = SurfaceEmitter()


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _now_ms() -> int:
    return int(time.time() * 1000)

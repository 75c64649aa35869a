from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from .GraphPrimitives import AnchorSet

logger = logging.getLogger(__name__)


class MountHandle:
    """
    Completion signal for one block mount.

    A factory returns the handle as soon as the mount is requested; the handle
    is resolved with the block's AnchorSet once the visual is attached and
    measured, or failed if it never will be. The gate is an asyncio.Event so it
    can be created outside a running loop and awaited from inside one.
    """

    def __init__(self, block_id: str, representation: Any = None) -> None:
        self.block_id = block_id
        self.representation = representation
        self.anchors: Optional[AnchorSet] = None
        self.error: Optional[BaseException] = None
        self._event = asyncio.Event()
        self._callbacks: List[Callable[["MountHandle"], None]] = []

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def resolve(self, anchors: AnchorSet) -> None:
        if self.done():
            logger.debug(f"Mount of block '{self.block_id}' already completed; ignoring resolve")
            return
        self.anchors = anchors
        self._complete()

    def fail(self, error: BaseException) -> None:
        if self.done():
            return
        self.error = error
        self._complete()

    def _complete(self) -> None:
        self._event.set()
        for cb in self._callbacks:
            self._run_callback(cb)
        self._callbacks.clear()

    def _run_callback(self, cb: Callable[["MountHandle"], None]) -> None:
        try:
            cb(self)
        except Exception:
            logger.exception(f"Mount callback for block '{self.block_id}' failed")

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def done(self) -> bool:
        return self._event.is_set()

    def succeeded(self) -> bool:
        return self.done() and self.error is None

    def add_done_callback(self, cb: Callable[["MountHandle"], None]) -> None:
        """Run *cb* on completion, or immediately if already complete."""
        if self.done():
            self._run_callback(cb)
        else:
            self._callbacks.append(cb)

    async def wait(self) -> None:
        await self._event.wait()

    def __repr__(self):
        state = "pending" if not self.done() else ("mounted" if self.succeeded() else "failed")
        return f"MountHandle({self.block_id}, {state})"

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def failed(cls, block_id: str, error: BaseException) -> "MountHandle":
        handle = cls(block_id)
        handle.fail(error)
        return handle

import asyncio
from typing import Any, Dict, Iterable, List
from logging import getLogger

from .GraphPrimitives import Block, BlockFormArray, Connection, ConnectReport, EdgeSpec
from .Interface import IBlockFactory, IContainer, IRenderingSurface
from .MountHandle import MountHandle
from .Types import AnchorSide, EndpointShape

logger = getLogger(__name__)

DEFAULT_SETTLE_TIMEOUT = 1.0  # seconds

# Sources leave from the right edge with a dot, targets are entered on the left
# edge with a rectangle.
EDGE_ANCHORS = (AnchorSide.RIGHT.value, AnchorSide.LEFT.value)
EDGE_ENDPOINTS = (EndpointShape.DOT.value, EndpointShape.RECTANGLE.value)


class RenderCoordinator:
    """
    Drives a rendering surface through the bulk draw protocol:

        begin_bulk_load -> mount_block* -> end_bulk_load
            -> await_mount_settled -> connect_all

    Edges are only drawn once both of their anchors have been reported by a
    completed mount. Anchors are kept in an explicit registry that is filled in
    as each MountHandle resolves, so connecting never scans the surface.
    """

    def __init__(self,
                 surface: IRenderingSurface,
                 factory: IBlockFactory,
                 container: IContainer,
                 settle_timeout: float = DEFAULT_SETTLE_TIMEOUT):
        self.surface = surface
        self.factory = factory
        self.container = container
        self.settle_timeout = settle_timeout

        self._source_anchors: Dict[str, Any] = {}
        self._target_anchors: Dict[str, Any] = {}
        # Incomplete mounts requested since the last begin_bulk_load, keyed by handle identity
        self._pending: Dict[int, MountHandle] = {}
        self._failed = 0

    # ------------------------------------------------------------------
    # Bulk load
    # ------------------------------------------------------------------

    def begin_bulk_load(self) -> None:
        self.container.clear()
        self.surface.reset()
        self._source_anchors.clear()
        self._target_anchors.clear()
        self._pending.clear()
        self._failed = 0
        self.surface.suspend_drawing(True)

    def end_bulk_load(self) -> None:
        self.surface.suspend_drawing(False, repaint_now=True)

    # ------------------------------------------------------------------
    # Mounting
    # ------------------------------------------------------------------

    def mount_block(self, block: Block, forms: BlockFormArray) -> MountHandle:
        try:
            handle = self.factory.mount(block, self.surface, self.container, forms)
        except Exception as exc:
            logger.exception(f"Block factory failed to mount block '{block.id}'")
            handle = MountHandle.failed(block.id, exc)

        self._pending[id(handle)] = handle
        handle.add_done_callback(self._register_anchors)
        return handle

    def _register_anchors(self, handle: MountHandle) -> None:
        if self._pending.pop(id(handle), None) is not handle:
            # Requested before the surface was last reset
            logger.debug(f"Ignoring stale mount of block '{handle.block_id}'")
            return
        if not handle.succeeded() or handle.anchors is None:
            self._failed += 1
            logger.warning(f"Block '{handle.block_id}' did not mount: {handle.error}")
            return
        # A re-mount of the same block overwrites the anchors of the earlier one.
        self._source_anchors.update(handle.anchors.sources)
        self._target_anchors.update(handle.anchors.targets)
        logger.debug(f"Registered anchors for block '{handle.block_id}': "
                     f"sources={list(handle.anchors.sources)} targets={list(handle.anchors.targets)}")

    async def await_mount_settled(self) -> int:
        """
        Wait until every mount requested in this bulk load has completed, or
        until the settle timeout elapses.

        Returns the number of mounts that are still pending or have failed.
        Never raises: unsettled mounts only mean missing anchors later on.
        """
        waiting = list(self._pending.values())
        if waiting:
            tasks = [asyncio.ensure_future(h.wait()) for h in waiting]
            _, still_pending = await asyncio.wait(tasks, timeout=self.settle_timeout)
            for task in still_pending:
                task.cancel()
            if still_pending:
                logger.warning(f"{len(still_pending)} block mount(s) did not settle within {self.settle_timeout}s")

        return len(self._pending) + self._failed

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def connect_all(self, connections: Iterable[Connection]) -> ConnectReport:
        report = ConnectReport()
        for connection in connections:
            source = self._source_anchors.get(connection.source_id)
            target = self._target_anchors.get(connection.target_id)

            if source is None or target is None:
                logger.debug(f"Skipping {connection}: source found={source is not None}, "
                             f"target found={target is not None}")
                report.unresolved.append(connection)
                continue

            self.surface.connect(EdgeSpec(source=source,
                                          target=target,
                                          anchors=EDGE_ANCHORS,
                                          endpoints=EDGE_ENDPOINTS))
            report.materialized += 1

        if report.unresolved:
            logger.info(f"Drew {report.materialized} connection(s), {report.unresolved_count} left unresolved")
        return report

    def materialized_connections(self) -> List[Any]:
        return self.surface.get_connections()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def source_anchors(self) -> Dict[str, Any]:
        return dict(self._source_anchors)

    @property
    def target_anchors(self) -> Dict[str, Any]:
        return dict(self._target_anchors)

    @property
    def pending_mounts(self) -> List[MountHandle]:
        return list(self._pending.values())

from typing import Any, List, Optional, Tuple, Union
import logging

from .GraphPrimitives import Block, BlockFormArray, ConnectReport, GraphSnapshot, Position
from .GraphStore import GraphStore
from .IdentifierAllocator import IdentifierAllocator
from .Interface import IBlockFactory, IContainer, IRenderingSurface
from .MountHandle import MountHandle
from .RenderCoordinator import RenderCoordinator, DEFAULT_SETTLE_TIMEOUT
from .Types import BlockType, SessionStatus

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_MESSAGE = "New message"
DEFAULT_BLOCK_POSITION = (200, 50)


class GraphSession:
    """
    State of one story editor frame.

    For each rendering surface, one instance of this class is created which
    1-on-1 manages the frame: it keeps track of the blocks and connections
    being edited and re-loads previously saved snapshots onto the surface.

    Callers must serialise calls to init(); overlapping loads on the same
    session are not guarded and race on the shared surface.
    """

    def __init__(self,
                 surface: IRenderingSurface,
                 factory: IBlockFactory,
                 container: IContainer,
                 settle_timeout: float = DEFAULT_SETTLE_TIMEOUT):
        self.store = GraphStore()
        self.allocator = IdentifierAllocator()
        self.coordinator = RenderCoordinator(surface, factory, container, settle_timeout)

        self._state: Optional[GraphSnapshot] = None
        self._forms = BlockFormArray()
        self._status = SessionStatus.UNINITIALIZED
        self.last_report: Optional[ConnectReport] = None

    async def init(self, snapshot: GraphSnapshot) -> None:
        """
        Draw a saved snapshot on the frame, replacing whatever was there.

        Blocks are mounted with drawing suspended and painted in one pass;
        connections are drawn once the mounts have settled. Connections whose
        anchors never appeared are left out (see last_report), init itself
        always completes.
        """
        if self._status is SessionStatus.LOADING:
            logger.warning("GraphSession.init() called while a previous init is still running; "
                           "calls must be serialised by the caller")

        self._status = SessionStatus.LOADING
        self._state = snapshot
        self.store.load(snapshot.blocks, snapshot.connections)

        # Clear any previously drawn items and start loading
        self.coordinator.begin_bulk_load()
        self._forms = BlockFormArray()

        for block in self.store.blocks():
            self.coordinator.mount_block(block, self._forms)
            self.allocator.advance()
            self.allocator.observe(block.id)

        # All drawing data loaded. Now draw
        self.coordinator.end_bulk_load()

        unsettled = await self.coordinator.await_mount_settled()
        if unsettled:
            logger.info(f"{unsettled} of {len(self.store)} block(s) unavailable for connecting")

        self.last_report = self.coordinator.connect_all(self.store.connections())
        self._status = SessionStatus.READY
        logger.debug(f"Frame loaded: {len(self.store)} block(s), "
                     f"{self.last_report.materialized} connection(s) drawn")

    def new_block(self, block_type: Union[BlockType, str]) -> MountHandle:
        """Create a new block on the frame at the default position and draw it."""
        block = Block(id=self.allocator.next(),
                      type=BlockType.parse(block_type),
                      message=DEFAULT_BLOCK_MESSAGE,
                      position=Position(*DEFAULT_BLOCK_POSITION))

        self.store.add_block(block)
        return self.coordinator.mount_block(block, self._forms)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> Optional[GraphSnapshot]:
        """Snapshot the frame was last loaded from (not a live view)."""
        return self._state

    @property
    def updated_blocks(self) -> BlockFormArray:
        return self._forms

    @property
    def blocks(self) -> Tuple[Block, ...]:
        return self.store.blocks()

    @property
    def connections(self) -> List[Any]:
        """Edges the rendering surface currently reports as drawn."""
        return self.coordinator.materialized_connections()

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def loaded(self) -> bool:
        return self._status is SessionStatus.READY

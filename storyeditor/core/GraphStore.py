from typing import Iterable, List, Optional, Tuple

from .GraphPrimitives import Block, Connection


class GraphStore:
    """
    Authoritative block and connection lists of one session.
    Pure data: no rendering knowledge and no consistency checks, dangling
    connection endpoints are only noticed when the coordinator draws them.
    """

    def __init__(self):
        self._blocks: List[Block] = []
        self._connections: List[Connection] = []

    def load(self, blocks: Iterable[Block], connections: Iterable[Connection]) -> None:
        self._blocks = list(blocks)
        self._connections = list(connections)

    # Uniqueness of block.id is the allocator's job, not checked here.
    def add_block(self, block: Block) -> None:
        self._blocks.append(block)

    def blocks(self) -> Tuple[Block, ...]:
        return tuple(self._blocks)

    def connections(self) -> Tuple[Connection, ...]:
        return tuple(self._connections)

    def get_block(self, block_id: str) -> Optional[Block]:
        for block in self._blocks:
            if block.id == block_id:
                return block
        return None

    def clear(self) -> None:
        self._blocks.clear()
        self._connections.clear()

    def __len__(self):
        return len(self._blocks)

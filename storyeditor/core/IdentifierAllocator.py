from logging import getLogger

logger = getLogger(__name__)


class IdentifierAllocator:
    """
    Per-session block id cursor. Starts at 1 and only ever moves forward;
    ids are never handed out twice within one session.
    """
    def __init__(self, start: int = 1):
        self._cursor = start

    def next(self) -> str:
        block_id = f"{self._cursor}"
        self._cursor += 1
        return block_id

    def advance(self) -> None:
        """Consume one id without issuing it (used for every loaded block)."""
        self._cursor += 1

    def observe(self, block_id: str) -> None:
        # Loaded ids are not guaranteed to be sequential from 1, so keep the
        # cursor past any numeric id already present on the frame.
        if not block_id.isdecimal():
            return
        seen = int(block_id)
        if seen >= self._cursor:
            logger.debug(f"Allocator cursor {self._cursor} behind loaded id '{block_id}', moving to {seen + 1}")
            self._cursor = seen + 1

    def peek(self) -> int:
        return self._cursor

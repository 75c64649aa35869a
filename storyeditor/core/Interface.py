from __future__ import annotations
from typing import Any, List, TYPE_CHECKING

from abc import ABC, abstractmethod

if TYPE_CHECKING:
    from .GraphPrimitives import Block, BlockFormArray, EdgeSpec
    from .MountHandle import MountHandle


# Drawing engine that paints blocks and edges for one frame.
class IRenderingSurface(ABC):
    @abstractmethod
    def reset(self) -> None:
        pass

    # While suspended, mounts are accepted but not painted. Leaving suspension
    # with repaint_now=True triggers one batched repaint.
    @abstractmethod
    def suspend_drawing(self, suspended: bool, repaint_now: bool = False) -> None:
        pass

    @abstractmethod
    def connect(self, edge: 'EdgeSpec') -> Any:
        pass

    @abstractmethod
    def get_connections(self) -> List[Any]:
        pass


class IContainer(ABC):
    @abstractmethod
    def clear(self) -> None:
        pass


class IBlockFactory(ABC):
    @abstractmethod
    def mount(self,
              block: 'Block',
              surface: IRenderingSurface,
              container: IContainer,
              forms: 'BlockFormArray') -> 'MountHandle':
        """Request the block's visual. Returns before the visual is attached."""
        pass

"""Graph-session core: blocks, connections and the surface draw protocol.

Public surface:
  GraphSession            – one per editing surface (frame)
  GraphStore              – authoritative block/connection lists
  IdentifierAllocator     – per-session block id cursor
  RenderCoordinator       – suspend / mount / resume / settle / connect
  Block, Connection, GraphSnapshot, Position, Story  – model primitives
"""

from .Types import BlockType, SessionStatus, AnchorSide, EndpointShape
from .GraphPrimitives import (
    Position, Block, Connection, Story, GraphSnapshot,
    AnchorSet, EdgeSpec, ConnectReport, BlockFormArray,
)
from .IdentifierAllocator import IdentifierAllocator
from .GraphStore import GraphStore
from .MountHandle import MountHandle
from .Interface import IRenderingSurface, IBlockFactory, IContainer
from .RenderCoordinator import RenderCoordinator
from .GraphSession import GraphSession

__all__ = [
    "BlockType", "SessionStatus", "AnchorSide", "EndpointShape",
    "Position", "Block", "Connection", "Story", "GraphSnapshot",
    "AnchorSet", "EdgeSpec", "ConnectReport", "BlockFormArray",
    "IdentifierAllocator", "GraphStore", "MountHandle",
    "IRenderingSurface", "IBlockFactory", "IContainer",
    "RenderCoordinator", "GraphSession",
]

"""
EditorState — registry of the frames this service is editing.

Every frame gets its own GraphSession drawn through the remote (browser)
surface. A demo snapshot is available so the UI has something to load on
first start.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from storyeditor.core.GraphPrimitives import Block, Connection, GraphSnapshot, Position, Story
from storyeditor.core.GraphSession import GraphSession
from storyeditor.core.Types import BlockType
from storyeditor.server.settings import settings
from storyeditor.server.surface.remote_surface import (
    RemoteBlockFactory, RemoteContainer, RemoteRenderingSurface,
)
from storyeditor.server.surface.surface_emitter import SurfaceEmitter, global_surface


class EditorState:
    """Holds one GraphSession per frame id."""

    def __init__(self,
                 emitter: SurfaceEmitter = global_surface,
                 settle_timeout: Optional[float] = None) -> None:
        self.emitter = emitter
        self.settle_timeout = settings.settle_timeout if settle_timeout is None else settle_timeout
        self.frames: Dict[str, GraphSession] = {}

    def get_frame(self, frame_id: str) -> Optional[GraphSession]:
        return self.frames.get(frame_id)

    def get_or_create_frame(self, frame_id: str) -> GraphSession:
        session = self.frames.get(frame_id)
        if session is None:
            session = GraphSession(
                RemoteRenderingSurface(frame_id, self.emitter),
                RemoteBlockFactory(frame_id, self.emitter),
                RemoteContainer(frame_id, self.emitter),
                settle_timeout=self.settle_timeout,
            )
            self.frames[frame_id] = session
        return session

    def frame_ids(self) -> List[str]:
        return list(self.frames)

    def reset(self) -> None:
        self.frames.clear()

    # ── Demo story ─────────────────────────────────────────────────────────

    @staticmethod
    def demo_snapshot() -> GraphSnapshot:
        #  Welcome ──► Ask name ──► Thanks
        #                  └──────► Bye
        # Output anchors are named "<block id>-out" by the editor UI.
        blocks = [
            Block("1", BlockType.MESSAGE, "Welcome to the demo story", Position(80, 100)),
            Block("2", BlockType.QUESTION, "What is your name?", Position(340, 100)),
            Block("3", BlockType.MESSAGE, "Thanks!", Position(600, 40)),
            Block("4", BlockType.END, "Bye", Position(600, 220)),
        ]
        connections = [
            Connection("1-out", "2"),
            Connection("2-out", "3"),
            Connection("2-out", "4"),
        ]
        return GraphSnapshot(Story("demo", "Demo story", "Seeded on first start"), blocks, connections)


editor_state = EditorState()

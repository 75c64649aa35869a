import asyncio
import logging

import pytest

from storyeditor.core.GraphPrimitives import Block, Connection, GraphSnapshot, Position, Story
from storyeditor.core.GraphSession import GraphSession
from storyeditor.core.HeadlessSurface import (
    HeadlessBlockFactory, HeadlessContainer, HeadlessRenderingSurface,
)
from storyeditor.core.Types import BlockType, SessionStatus


def make_snapshot(block_ids, connections=()):
    blocks = [Block(b, BlockType.MESSAGE, f"message {b}", Position(10 * i, 0)) for i, b in enumerate(block_ids)]
    return GraphSnapshot(Story("s1", "Story"), blocks, [Connection(s, t) for s, t in connections])


class TestGraphSession:

    def setup_method(self):
        self.surface = HeadlessRenderingSurface()
        self.container = HeadlessContainer()
        self.factory = HeadlessBlockFactory()
        self.session = GraphSession(self.surface, self.factory, self.container, settle_timeout=0.05)

    # --- Status ---

    def test_new_session_is_not_loaded(self):
        assert self.session.status is SessionStatus.UNINITIALIZED
        assert self.session.loaded is False
        assert self.session.state is None
        assert self.session.last_report is None

    def test_status_transitions_through_loading(self):
        """Status is LOADING while init waits on mounts, READY afterwards."""
        self.factory.deferred = {"1"}
        self.session.coordinator.settle_timeout = 2.0
        seen = []

        async def run_test():
            task = asyncio.ensure_future(self.session.init(make_snapshot(["1"])))
            await asyncio.sleep(0.01)
            seen.append(self.session.status)
            self.factory.complete("1")
            await task
            seen.append(self.session.status)

        asyncio.run(run_test())
        assert seen == [SessionStatus.LOADING, SessionStatus.READY]
        assert self.session.loaded is True

    # --- Loading ---

    def test_scenario_single_block_no_connections(self):
        snapshot = make_snapshot(["1"])
        asyncio.run(self.session.init(snapshot))

        assert len(self.session.state.blocks) == 1
        assert self.session.connections == []
        assert self.session.last_report.materialized == 0

    def test_scenario_two_blocks_one_connection(self):
        asyncio.run(self.session.init(make_snapshot(["1", "2"], [("1", "2")])))

        assert len(self.session.connections) == 1
        edge = self.session.connections[0]
        assert (edge.source.id, edge.target.id) == ("1", "2")
        assert edge.anchors == ("Right", "Left")
        assert edge.endpoints == ("Dot", "Rectangle")

    def test_scenario_target_never_mounts(self):
        """A broken target visual drops the edge without raising."""
        self.factory.failing = {"2"}
        asyncio.run(self.session.init(make_snapshot(["1", "2"], [("1", "2")])))

        assert self.session.connections == []
        assert self.session.last_report.unresolved == [Connection("1", "2")]
        assert self.session.loaded is True

    def test_slow_mount_within_timeout_is_connected(self):
        self.factory.deferred = {"2"}
        self.session.coordinator.settle_timeout = 2.0

        async def run_test():
            task = asyncio.ensure_future(self.session.init(make_snapshot(["1", "2"], [("1", "2")])))
            await asyncio.sleep(0.01)
            self.factory.complete("2")
            await task

        asyncio.run(run_test())
        assert len(self.session.connections) == 1

    def test_store_matches_snapshot_after_init(self):
        snapshot = make_snapshot(["4", "2", "9"], [("4", "2")])
        asyncio.run(self.session.init(snapshot))

        assert list(self.session.store.blocks()) == snapshot.blocks
        assert list(self.session.store.connections()) == snapshot.connections
        assert self.factory.mounted == ["4", "2", "9"]

    def test_reload_is_idempotent(self):
        snapshot = make_snapshot(["1", "2", "3"], [("1", "2"), ("2", "3")])
        asyncio.run(self.session.init(snapshot))
        first = (self.session.blocks, self.session.store.connections())
        asyncio.run(self.session.init(snapshot))

        assert (self.session.blocks, self.session.store.connections()) == first
        assert len(self.session.connections) == 2
        assert self.container.clear_count == 2
        assert len(self.session.updated_blocks) == 3

    def test_init_draws_blocks_with_drawing_suspended(self):
        asyncio.run(self.session.init(make_snapshot(["1", "2"], [("1", "2")])))
        assert self.surface.call_names() == ["reset", "suspend_drawing", "suspend_drawing", "connect"]

    def test_state_is_the_loaded_snapshot(self):
        snapshot = make_snapshot(["1"])
        asyncio.run(self.session.init(snapshot))
        self.session.new_block(BlockType.MESSAGE)

        assert self.session.state is snapshot
        assert len(snapshot.blocks) == 1
        assert len(self.session.blocks) == 2

    def test_reentrant_init_is_logged(self, caplog):
        caplog.set_level(logging.WARNING)
        self.factory.deferred = {"1"}

        async def run_test():
            first = asyncio.ensure_future(self.session.init(make_snapshot(["1"])))
            await asyncio.sleep(0)
            await self.session.init(make_snapshot(["2"]))
            await first

        asyncio.run(run_test())
        assert "must be serialised" in caplog.text
        assert self.session.loaded is True

    # --- New blocks ---

    def test_new_blocks_on_empty_session(self):
        ids = [self.session.new_block("message").block_id for _ in range(3)]

        assert ids == ["1", "2", "3"]
        assert len(self.session.store.blocks()) == 3

    def test_new_block_defaults(self):
        handle = self.session.new_block(BlockType.QUESTION)
        block = self.session.store.get_block(handle.block_id)

        assert block.type is BlockType.QUESTION
        assert block.message == "New message"
        assert block.position == Position(200, 50)
        assert handle.succeeded()
        assert self.session.updated_blocks.find(block.id)["type"] == "question"

    def test_new_block_mounts_without_suspending(self):
        self.session.new_block("message")
        assert "suspend_drawing" not in self.surface.call_names()
        assert self.factory.mounted == ["1"]

    def test_new_block_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            self.session.new_block("hologram")
        assert len(self.session.blocks) == 0

    def test_new_block_ids_follow_loaded_blocks(self):
        asyncio.run(self.session.init(make_snapshot(["1", "2"])))
        assert self.session.new_block("message").block_id == "3"

    def test_new_block_never_reuses_loaded_ids(self):
        """Loaded ids that are not sequential from 1 are still skipped."""
        asyncio.run(self.session.init(make_snapshot(["3", "4"])))
        new_id = self.session.new_block("message").block_id

        assert new_id not in {"3", "4"}
        ids = [b.id for b in self.session.blocks]
        assert len(ids) == len(set(ids))

    def test_counter_survives_reinit(self):
        self.session.new_block("message")
        asyncio.run(self.session.init(make_snapshot([])))
        assert self.session.new_block("message").block_id == "2"

    def test_new_block_anchors_are_connectable(self):
        asyncio.run(self.session.init(make_snapshot(["1"])))
        handle = self.session.new_block("message")
        report = self.session.coordinator.connect_all([Connection("1", handle.block_id)])
        assert report.materialized == 1

    def test_mounted_new_blocks_are_not_kept_pending(self):
        for _ in range(5):
            self.session.new_block("message")
        assert self.session.coordinator.pending_mounts == []

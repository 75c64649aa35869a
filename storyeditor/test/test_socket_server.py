import asyncio

import pytest

from storyeditor.core.MountHandle import MountHandle
from storyeditor.server.surface import socket_server
from storyeditor.server.surface.surface_emitter import MountAbandoned, global_surface


class TestSocketHandlers:

    @pytest.fixture(autouse=True)
    def rooms(self, monkeypatch):
        self.rooms = []

        async def enter_room(sid, room):
            self.rooms.append((sid, room))

        monkeypatch.setattr(socket_server.sio, "enter_room", enter_room)

    def teardown_method(self):
        global_surface.abandon_pending()
        socket_server._client_frames.clear()

    def test_join_frame_enters_room(self):
        asyncio.run(socket_server.join_frame("sid-a", {"frameId": "frame-a"}))
        asyncio.run(socket_server.join_frame("sid-b", {}))

        assert self.rooms == [("sid-a", "frame-a")]
        assert socket_server._client_frames == {"sid-a": "frame-a"}

    def test_block_mounted_resolves_pending_mount(self):
        handle = MountHandle("4")
        global_surface.expect_mount("frame-a", handle)

        asyncio.run(socket_server.block_mounted("sid-a", {
            "frameId": "frame-a", "blockId": 4, "sources": {"4-out": "el-out"}, "targets": None,
        }))

        assert handle.succeeded()
        assert handle.anchors.sources == {"4-out": "el-out"}
        assert handle.anchors.targets == {}

    def test_disconnect_abandons_only_the_clients_frame(self):
        mine, theirs = MountHandle("1"), MountHandle("1")
        global_surface.expect_mount("frame-a", mine)
        global_surface.expect_mount("frame-b", theirs)
        asyncio.run(socket_server.join_frame("sid-a", {"frameId": "frame-a"}))

        asyncio.run(socket_server.disconnect("sid-a"))

        assert isinstance(mine.error, MountAbandoned)
        assert not theirs.done()
        assert global_surface.pending_mounts("frame-b") == [theirs]
        assert "sid-a" not in socket_server._client_frames

    def test_disconnect_keeps_mounts_another_client_is_showing(self):
        handle = MountHandle("1")
        global_surface.expect_mount("frame-a", handle)
        asyncio.run(socket_server.join_frame("sid-a", {"frameId": "frame-a"}))
        asyncio.run(socket_server.join_frame("sid-b", {"frameId": "frame-a"}))

        asyncio.run(socket_server.disconnect("sid-a"))
        assert not handle.done()

        asyncio.run(socket_server.disconnect("sid-b"))
        assert isinstance(handle.error, MountAbandoned)

    def test_disconnect_without_join_leaves_pending_mounts(self):
        handle = MountHandle("1")
        global_surface.expect_mount("frame-b", handle)

        asyncio.run(socket_server.disconnect("sid-x"))

        assert not handle.done()

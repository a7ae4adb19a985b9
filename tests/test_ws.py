"""Dashboard WebSocket handler tests with an in-process socket."""
import asyncio
from types import SimpleNamespace

from fastapi import WebSocketDisconnect

from conftest import FakeChannel
from sos_relay.fanout import ChannelRegistry
from sos_relay.routers.ws import ws_reports


class DashboardSocket(FakeChannel):
    """Records whether it was already subscribed when each message went out."""

    def __init__(self, registry: ChannelRegistry):
        super().__init__()
        self.registry = registry
        self.app = SimpleNamespace(state=SimpleNamespace(intake=SimpleNamespace(fanout=registry)))
        self.subscribed_when_sent: list[bool] = []
        self.subscribed_while_listening = None

    async def accept(self) -> None:
        pass

    async def send_json(self, message: dict) -> None:
        self.subscribed_when_sent.append(self in self.registry.channels)
        await super().send_json(message)

    async def receive_text(self) -> str:
        self.subscribed_while_listening = self in self.registry.channels
        raise WebSocketDisconnect(1000)


def test_hello_goes_out_before_subscription():
    async def scenario():
        registry = ChannelRegistry()
        socket = DashboardSocket(registry)
        await ws_reports(socket)
        return registry, socket

    registry, socket = asyncio.run(scenario())
    assert socket.messages == [{"type": "connected"}]
    assert socket.subscribed_when_sent == [False]
    assert socket.subscribed_while_listening is True
    assert len(registry) == 0

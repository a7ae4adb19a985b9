"""Live-viewer channel registry and the "reports changed" broadcast."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi.websockets import WebSocketState

logger = logging.getLogger(__name__)

REPORTS_CHANGED = {"type": "reports_changed"}


def is_open(channel: Any) -> bool:
    """A channel is open when both ends report CONNECTED. Fakes without state count as open."""
    for attr in ("client_state", "application_state"):
        state = getattr(channel, attr, WebSocketState.CONNECTED)
        if state != WebSocketState.CONNECTED:
            return False
    return True


@dataclass
class ChannelRegistry:
    """Connected dashboards. Subscriptions grow on connect and shrink on disconnect or send failure."""

    channels: set[Any] = field(default_factory=set)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def __len__(self) -> int:
        return len(self.channels)

    async def subscribe(self, channel: Any) -> None:
        async with self._lock:
            self.channels.add(channel)
        logger.debug("Live viewer subscribed (%d open)", len(self.channels))

    async def unsubscribe(self, channel: Any) -> None:
        async with self._lock:
            self.channels.discard(channel)
        logger.debug("Live viewer left (%d open)", len(self.channels))

    async def _send(self, channel: Any, message: dict[str, Any]) -> bool:
        if not is_open(channel):
            return False
        try:
            await channel.send_json(message)
        except Exception as e:
            logger.debug("Dropping live viewer after send failure: %s", e)
            return False
        return True

    async def notify(self) -> int:
        """Send the invalidation signal to every open channel. Never raises.

        Returns the number of channels that accepted the message.
        """
        async with self._lock:
            conns = list(self.channels)
        if not conns:
            return 0
        results = await asyncio.gather(
            *(self._send(ch, REPORTS_CHANGED) for ch in conns),
            return_exceptions=True,
        )
        dead = [ch for ch, ok in zip(conns, results) if ok is not True]
        if dead:
            async with self._lock:
                for ch in dead:
                    self.channels.discard(ch)
        delivered = len(conns) - len(dead)
        logger.debug("reports_changed delivered to %d/%d viewers", delivered, len(conns))
        return delivered

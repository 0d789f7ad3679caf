from __future__ import annotations

from octopoz.application.ports.publisher import EventPublisher
from octopoz.infrastructure.cache.redis_client import get_redis_client


class RedisEventPublisher(EventPublisher):
    """Fire-and-forget pub/sub fan-out of committed engine events."""

    def __init__(self, timeout_seconds: float = 0.5) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        get_redis_client(timeout_seconds=self._timeout_seconds).publish(channel, message)

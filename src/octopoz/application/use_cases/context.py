from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from octopoz.application.ports.publisher import EventPublisher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraceContext:
    trace_id: str | None
    request_id: str | None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def publish_after_commit(publisher: EventPublisher, channel: str, message: str) -> None:
    # The transaction is already committed; a lost event must not fail the request.
    try:
        publisher.publish(channel=channel, message=message)
    except Exception:
        logger.warning("event_publish_failed", extra={"channel": channel}, exc_info=True)

from __future__ import annotations

import logging

from rrs.application.ports.publisher import EventPublisher

logger = logging.getLogger(__name__)


def publish_after_commit(publisher: EventPublisher, channel: str, message: str) -> None:
    """Publish an event for a transition that is already committed.

    Delivery failures are logged; the committed state change stands.
    """
    try:
        publisher.publish(channel=channel, message=message)
    except Exception:
        logger.exception("event_publish_failed", extra={"channel": channel})

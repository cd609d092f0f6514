"""Periodic snapshot refresh job."""

from __future__ import annotations

import logging

from kharcha.services.change_feed import ANY_COLLECTION, ChangeFeed

logger = logging.getLogger(__name__)


async def snapshot_poll(feed: ChangeFeed) -> None:
    """Publish a catch-all change so edits made outside this service are picked up."""
    logger.debug("snapshot_poll publishing to %s subscribers", feed.subscriber_count)
    feed.publish(ANY_COLLECTION)

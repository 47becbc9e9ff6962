"""
Post-commit orphan cleanup.

Updating or deleting an entry can leave tags and categories that nothing
references any more. The sweep runs after the response is sent (FastAPI
BackgroundTasks), outside the write transaction, so request latency and lock
hold times do not depend on it.
"""

from __future__ import annotations

import logging

from . import repository

logger = logging.getLogger(__name__)


async def prune_orphans_background(*, user_id: int) -> None:
    """
    BackgroundTasks entrypoint.

    This should never raise to the request path; we just log failures.
    The sweep is idempotent, so a failed run is repaired by the next one.
    """
    try:
        tags_removed, categories_removed = await repository.prune_orphans(user_id=user_id)
    except Exception:
        logger.exception("orphan_prune_failed user_id=%s", user_id)
        return

    if tags_removed or categories_removed:
        logger.info(
            "orphan_prune_complete user_id=%s tags_removed=%s categories_removed=%s",
            user_id,
            tags_removed,
            categories_removed,
        )

"""Delivery of interception outcomes to the results collector.

Every intercepted webhook, accepted or rejected, is reported on an
asyncio.Queue stored in ``app.state.results``. Whatever consumes the queue
decides what to do with accepted payloads.
"""

import asyncio

import structlog
from fastapi import Request
from pydantic import BaseModel

logger = structlog.get_logger()


class InterceptResult(BaseModel):
    """Outcome of one intercepted webhook request."""

    accepted: bool
    payload: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, raw_body: bytes) -> "InterceptResult":
        """Build an accepted result carrying the body as text."""
        return cls(accepted=True, payload=raw_body.decode("utf-8", errors="replace"))

    @classmethod
    def failure(cls, detail: str) -> "InterceptResult":
        """Build a rejected result carrying the error detail."""
        return cls(accepted=False, error=f"error: {detail}")


def create_results_queue(maxsize: int) -> "asyncio.Queue[InterceptResult]":
    """Create the bounded queue interception outcomes are delivered to."""
    return asyncio.Queue(maxsize=maxsize)


def publish_result(request: Request, result: InterceptResult) -> bool:
    """Put ``result`` on the app's results queue without blocking.

    Returns:
        True if the result was queued, False if no queue is configured or
        the queue is full (the result is dropped and a warning logged).
    """
    queue: asyncio.Queue | None = getattr(request.app.state, "results", None)
    if queue is None:
        logger.warning("results.no_queue", accepted=result.accepted)
        return False

    try:
        queue.put_nowait(result)
    except asyncio.QueueFull:
        logger.warning("results.queue_full", accepted=result.accepted, maxsize=queue.maxsize)
        return False

    logger.debug("results.published", accepted=result.accepted, pending=queue.qsize())
    return True

"""Webhook interception endpoint.

Accepts signed webhook deliveries, verifies them via the
validate_webhook_signature dependency and hands the verified body to the
results collector.
"""

import structlog
from fastapi import APIRouter, Depends, Request

from hmacgate.api.dependencies import get_settings, validate_webhook_signature
from hmacgate.api.results import InterceptResult, publish_result
from hmacgate.core.config import Settings

logger = structlog.get_logger()
router = APIRouter()


@router.post("/intercept")
async def intercept_webhook(
    request: Request,
    raw_body: bytes = Depends(validate_webhook_signature),
    settings: Settings = Depends(get_settings),
):
    """Receive a signed webhook and forward its body to the results queue.

    HTTP Status Codes:
        200: Signature valid, body forwarded
        401: Signature header missing or signature invalid
    """
    queued = publish_result(request, InterceptResult.success(raw_body))

    logger.info("webhook.intercepted", body_size=len(raw_body), queued=queued)
    return {
        "status": "success",
        "algorithm": settings.hmac_algorithm.value,
        "size": len(raw_body),
        "queued": queued,
    }

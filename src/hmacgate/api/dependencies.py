"""FastAPI dependencies for request validation and common operations.

This module provides reusable FastAPI dependencies for:
- Settings access
- Webhook signature validation
"""

import structlog
from fastapi import Depends, HTTPException, Request, status

from hmacgate.api.results import InterceptResult, publish_result
from hmacgate.core.config import Settings
from hmacgate.services.exceptions import SignatureError
from hmacgate.services.signature import verify_signature

logger = structlog.get_logger()


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings instance loaded from environment variables.
    """
    return Settings()  # type: ignore[call-arg]  # Pydantic loads from env vars


async def validate_webhook_signature(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> bytes:
    """Validate the webhook signature before processing the request.

    Reads the signature envelope from the header named by ``HEADER`` and the
    raw request body, then verifies the envelope with the configured secret
    and algorithm. The body is read completely before verification starts.

    Args:
        request: FastAPI Request object (contains raw body and headers)
        settings: Application settings (injected via dependency)

    Returns:
        Raw request body bytes (for further processing by the endpoint)

    Raises:
        HTTPException: 401 Unauthorized if the signature is missing or invalid.
            Rejections are also published to the results queue.

    Example:
        >>> @router.post("/webhooks/intercept")
        >>> async def webhook_endpoint(
        ...     raw_body: bytes = Depends(validate_webhook_signature)
        ... ):
        ...     # Signature is validated - safe to process
        ...     payload = json.loads(raw_body)
    """
    header_name = settings.signature_header
    logger.debug("webhook.using_header", header=header_name)

    signature = request.headers.get(header_name)
    # An empty value is left to the verifier, which reports it as malformed
    if signature is None:
        detail = f"Missing {header_name} header"
        logger.warning("webhook.signature_missing", header=header_name)
        publish_result(request, InterceptResult.failure(detail))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)

    # Must be the exact bytes received, before any parsing
    raw_body = await request.body()

    try:
        verify_signature(
            body=raw_body,
            envelope=signature,
            secret=settings.webhook_secret,
            expected_algorithm=settings.hmac_algorithm,
        )
    except SignatureError as e:
        logger.warning(
            "webhook.signature_rejected",
            header=header_name,
            error_kind=e.kind.value,
            error=e.detail,
            body_size=len(raw_body),
        )
        publish_result(request, InterceptResult.failure(e.detail))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": e.kind.value, "message": e.detail},
        )

    logger.info(
        "webhook.signature_valid",
        algorithm=settings.hmac_algorithm.value,
        body_size=len(raw_body),
    )
    return raw_body

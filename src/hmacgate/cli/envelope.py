"""CLI commands for signing and verifying webhook bodies.

Usage:
    python -m hmacgate.cli <command> [OPTIONS]

Examples:
    # Print the envelope a sender would attach to payload.json
    python -m hmacgate.cli sign --secret s3cret payload.json

    # Verify an envelope against a body read from stdin
    cat payload.json | python -m hmacgate.cli verify --envelope "sha256=5d5d..." -

    # Run the interception server
    python -m hmacgate.cli serve --port 8080
"""

import sys
from argparse import ArgumentParser, Namespace

import structlog
from pydantic import ValidationError

from hmacgate.core.config import Settings, configure_logging
from hmacgate.services.exceptions import SignatureError
from hmacgate.services.mac import resolve_algorithm, supported_algorithms
from hmacgate.services.signature import sign_envelope, verify_signature

logger = structlog.get_logger()


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command-line arguments."""
    parser = ArgumentParser(
        description="Sign and verify webhook HMAC signature envelopes",
        epilog="Secret and algorithm default to WEBHOOK_SECRET and HMAC_ALGORITHM",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("sign", "Print the signature envelope for a body"),
        ("verify", "Verify a signature envelope against a body"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "body",
            nargs="?",
            default="-",
            help="Path to the body file, or - for stdin (default: -)",
        )
        sub.add_argument("--secret", help="Shared webhook secret (default: WEBHOOK_SECRET)")
        sub.add_argument(
            "--algorithm",
            choices=supported_algorithms(),
            help="Hash algorithm (default: HMAC_ALGORITHM)",
        )
        if name == "verify":
            sub.add_argument("--envelope", required=True, help='Envelope, e.g. "sha256=5d5d..."')

    serve = subparsers.add_parser("serve", help="Run the webhook interception server")
    serve.add_argument("--host", help="Bind address (default: HOST)")
    serve.add_argument("--port", type=int, help="Bind port (default: PORT)")

    return parser.parse_args(argv)


def read_body(path: str) -> bytes:
    """Read raw body bytes from ``path``, or stdin when ``path`` is "-"."""
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Exit code: 0 (success), 1 (verification or I/O error)
    """
    args = parse_args(argv)

    # An explicit --secret satisfies the WEBHOOK_SECRET requirement
    overrides = {}
    if getattr(args, "secret", None) is not None:
        overrides["WEBHOOK_SECRET"] = args.secret

    try:
        settings = Settings(**overrides)  # type: ignore[call-arg]
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        settings.log_level = "DEBUG"
    # stdout carries command output only
    configure_logging(settings, file=sys.stderr)

    if args.command == "serve":
        import uvicorn

        from hmacgate.app import create_app

        uvicorn.run(
            create_app(),
            host=args.host or settings.host,
            port=args.port or settings.port,
        )
        return 0

    secret = settings.webhook_secret
    algorithm = resolve_algorithm(args.algorithm or settings.hmac_algorithm)

    try:
        body = read_body(args.body)
    except OSError as e:
        logger.error("cli.read_failed", path=args.body, error=str(e))
        print(f"Error: cannot read {args.body}: {e}", file=sys.stderr)
        return 1

    if args.command == "sign":
        print(sign_envelope(body, secret, algorithm))
        logger.info("cli.signed", algorithm=algorithm.value, body_size=len(body))
        return 0

    try:
        verify_signature(body, args.envelope, secret, algorithm)
    except SignatureError as e:
        logger.warning("cli.verify_failed", error_kind=e.kind.value, body_size=len(body))
        print(f"Invalid signature ({e.kind.value}): {e.detail}", file=sys.stderr)
        return 1

    logger.info("cli.verified", algorithm=algorithm.value, body_size=len(body))
    print("Signature valid")
    return 0

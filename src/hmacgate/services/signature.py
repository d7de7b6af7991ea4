"""HMAC signature validation for incoming webhooks.

This module verifies vendor signature envelopes of the form
``<algorithm>=<hex-digest>`` against the raw request body. The digest is
recomputed with the shared secret and compared with hmac.compare_digest()
so the comparison time does not depend on where the digests differ.

Security Note:
    verify_signature() MUST be called on the exact raw body bytes before any
    parsing. Every failure raises a specific SignatureError subclass; nothing
    is silently treated as a valid or empty digest.
"""

import binascii
import hmac
from dataclasses import dataclass

from hmacgate.services.exceptions import (
    AlgorithmMismatch,
    InvalidDigestEncoding,
    MalformedEnvelope,
    SignatureMismatch,
)
from hmacgate.services.mac import HashAlgorithm, compute_mac, resolve_algorithm

ENVELOPE_SEPARATOR = "="


@dataclass(frozen=True)
class SignatureEnvelope:
    """Parsed ``algorithm=hexdigest`` signature header value."""

    algorithm: str
    digest_hex: str

    def __str__(self) -> str:
        return f"{self.algorithm}{ENVELOPE_SEPARATOR}{self.digest_hex}"


def parse_envelope(envelope: str) -> SignatureEnvelope:
    """Split a signature envelope into algorithm token and hex digest.

    The envelope must contain exactly one separator with a non-empty part on
    each side. No whitespace trimming is done.

    Raises:
        MalformedEnvelope: If the envelope does not have the expected shape.
    """
    if envelope != envelope.strip():
        raise MalformedEnvelope("encoded hash has leading or trailing whitespace")

    if ENVELOPE_SEPARATOR not in envelope:
        raise MalformedEnvelope("encoded hash does not contain a =")

    algorithm, digest_hex = envelope.split(ENVELOPE_SEPARATOR, 1)
    if ENVELOPE_SEPARATOR in digest_hex:
        raise MalformedEnvelope("encoded hash contains more than one =")
    if not algorithm or not digest_hex:
        raise MalformedEnvelope("encoded hash has an empty algorithm or digest")

    return SignatureEnvelope(algorithm=algorithm, digest_hex=digest_hex)


def decode_digest(digest_hex: str) -> bytes:
    """Decode a hex digest (either case, even length, no whitespace).

    Raises:
        InvalidDigestEncoding: If ``digest_hex`` is not valid hexadecimal.
    """
    try:
        return binascii.unhexlify(digest_hex)
    except (binascii.Error, ValueError) as e:
        # unhexlify raises ValueError for non-ASCII input
        raise InvalidDigestEncoding(f"digest is not valid hex: {e}") from e


def format_envelope(digest: bytes, algorithm: HashAlgorithm | str) -> str:
    """Render a raw digest as an ``algorithm=hexdigest`` envelope."""
    algorithm = resolve_algorithm(algorithm)
    return str(SignatureEnvelope(algorithm=algorithm.value, digest_hex=digest.hex()))


def sign_envelope(body: bytes, secret: bytes | str, algorithm: HashAlgorithm | str) -> str:
    """Compute the envelope a sender would attach to ``body``."""
    return format_envelope(compute_mac(body, _secret_bytes(secret), algorithm), algorithm)


def verify_signature(
    body: bytes,
    envelope: str,
    secret: bytes | str,
    expected_algorithm: HashAlgorithm | str,
) -> None:
    """Verify a webhook signature envelope against the raw body.

    Steps, each short-circuiting on failure:
    1. Parse the envelope into algorithm token and digest
    2. Require the token to equal ``expected_algorithm`` exactly
    3. Decode the hex digest
    4. Recompute the HMAC and compare in constant time

    Args:
        body: Raw request body bytes (NOT parsed JSON).
        envelope: Signature header value, e.g. "sha256=5d5d7...".
        secret: Shared webhook secret. Strings are encoded as UTF-8.
        expected_algorithm: Algorithm the receiver is configured for.

    Raises:
        UnsupportedAlgorithm: ``expected_algorithm`` is not supported.
        MalformedEnvelope: Envelope is not ``algorithm=hexdigest``.
        AlgorithmMismatch: Envelope declares a different algorithm.
        InvalidDigestEncoding: Digest is not valid hex.
        SignatureMismatch: Digest does not match the body and secret.

    Example:
        >>> verify_signature(raw_body, request.headers["X-Hub-Signature-256"],
        ...                  secret, HashAlgorithm.SHA256)
    """
    expected = resolve_algorithm(expected_algorithm)
    parsed = parse_envelope(envelope)

    if parsed.algorithm != expected.value:
        raise AlgorithmMismatch(parsed.algorithm)

    supplied = decode_digest(parsed.digest_hex)
    computed = compute_mac(body, _secret_bytes(secret), expected)

    # compare_digest returns False on length mismatch without inspecting content
    if not hmac.compare_digest(computed, supplied):
        raise SignatureMismatch()


def _secret_bytes(secret: bytes | str) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return secret

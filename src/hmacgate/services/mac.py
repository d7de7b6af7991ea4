"""Keyed-hash MAC computation.

Computes HMAC digests over raw bytes with a hash algorithm chosen per call.
The algorithm is resolved against a closed enumeration before any hashing
work happens, so an unknown token never reaches hashlib.
"""

import hashlib
import hmac
from enum import Enum
from typing import Callable

from hmacgate.services.exceptions import UnsupportedAlgorithm


class HashAlgorithm(str, Enum):
    """Hash algorithms accepted for HMAC computation."""

    SHA256 = "sha256"
    SHA512 = "sha512"


_CONSTRUCTORS: dict[HashAlgorithm, Callable] = {
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
}


def check_constructors(constructors: dict[HashAlgorithm, Callable]) -> None:
    """Raise RuntimeError unless every HashAlgorithm member has a constructor."""
    missing = set(HashAlgorithm) - set(constructors)
    if missing:
        names = ", ".join(sorted(algorithm.value for algorithm in missing))
        raise RuntimeError(f"missing hash constructor for: {names}")


check_constructors(_CONSTRUCTORS)


def supported_algorithms() -> tuple[str, ...]:
    """Return supported algorithm tokens in declaration order."""
    return tuple(algorithm.value for algorithm in HashAlgorithm)


def resolve_algorithm(algorithm: HashAlgorithm | str) -> HashAlgorithm:
    """Resolve an algorithm token to a HashAlgorithm member.

    Matching is exact and case-sensitive: "sha256" resolves, "SHA256" does not.

    Raises:
        UnsupportedAlgorithm: If the token is not a supported algorithm.
    """
    if isinstance(algorithm, HashAlgorithm):
        return algorithm
    try:
        return HashAlgorithm(algorithm)
    except ValueError as e:
        raise UnsupportedAlgorithm(str(algorithm)) from e


def compute_mac(message: bytes, key: bytes, algorithm: HashAlgorithm | str) -> bytes:
    """Compute the HMAC of ``message`` keyed with ``key``.

    Args:
        message: Bytes to authenticate, hashed in a single pass.
        key: Secret key bytes. Empty keys are accepted; callers are
            responsible for choosing a strong secret.
        algorithm: HashAlgorithm member or its token ("sha256", "sha512").

    Returns:
        Raw digest bytes (32 bytes for sha256, 64 for sha512).

    Raises:
        UnsupportedAlgorithm: If ``algorithm`` is not supported. Raised before
            any hashing is done.
    """
    constructor = _CONSTRUCTORS[resolve_algorithm(algorithm)]
    return hmac.new(key=key, msg=message, digestmod=constructor).digest()

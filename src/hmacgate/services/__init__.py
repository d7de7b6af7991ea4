"""Signature verification services.

The MAC engine and verifier are pure functions: they read no configuration,
perform no I/O and keep no state between calls.
"""

from hmacgate.services.exceptions import (
    AlgorithmMismatch,
    ErrorKind,
    InvalidDigestEncoding,
    MalformedEnvelope,
    SignatureError,
    SignatureMismatch,
    UnsupportedAlgorithm,
)
from hmacgate.services.mac import HashAlgorithm, compute_mac, resolve_algorithm
from hmacgate.services.signature import (
    SignatureEnvelope,
    parse_envelope,
    sign_envelope,
    verify_signature,
)

__all__ = [
    "AlgorithmMismatch",
    "ErrorKind",
    "HashAlgorithm",
    "InvalidDigestEncoding",
    "MalformedEnvelope",
    "SignatureEnvelope",
    "SignatureError",
    "SignatureMismatch",
    "UnsupportedAlgorithm",
    "compute_mac",
    "parse_envelope",
    "resolve_algorithm",
    "sign_envelope",
    "verify_signature",
]

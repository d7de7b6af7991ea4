"""Signature verification error hierarchy.

This module defines the exceptions raised by the MAC engine and the signature
verifier:
- SignatureError: Base for all verification failures, carries an ErrorKind
- UnsupportedAlgorithm: Algorithm token outside the supported set
- MalformedEnvelope: Envelope is not of the form "algorithm=hexdigest"
- AlgorithmMismatch: Envelope declares a different algorithm than expected
- InvalidDigestEncoding: Digest segment is not valid hexadecimal
- SignatureMismatch: Recomputed MAC does not match the supplied digest

All errors are terminal for a single verification attempt. Error details never
contain the secret or the supplied digest.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable failure category, safe to log and return to callers."""

    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    MALFORMED_ENVELOPE = "malformed_envelope"
    ALGORITHM_MISMATCH = "algorithm_mismatch"
    INVALID_DIGEST_ENCODING = "invalid_digest_encoding"
    SIGNATURE_MISMATCH = "signature_mismatch"


class SignatureError(Exception):
    """Base exception for all signature verification failures."""

    kind: ErrorKind

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class UnsupportedAlgorithm(SignatureError):
    """Hash algorithm token is not one of the supported algorithms."""

    kind = ErrorKind.UNSUPPORTED_ALGORITHM

    def __init__(self, algorithm: str):
        super().__init__(f"unsupported SHA version: {algorithm}")
        self.algorithm = algorithm


class MalformedEnvelope(SignatureError):
    """Signature envelope could not be split into algorithm and digest."""

    kind = ErrorKind.MALFORMED_ENVELOPE


class AlgorithmMismatch(SignatureError):
    """Envelope declares an algorithm other than the expected one.

    The unexpected token is kept on ``algorithm`` for diagnostics.
    """

    kind = ErrorKind.ALGORITHM_MISMATCH

    def __init__(self, algorithm: str):
        super().__init__(f"incorrect hashing method: {algorithm}")
        self.algorithm = algorithm


class InvalidDigestEncoding(SignatureError):
    """Digest segment is not even-length hexadecimal."""

    kind = ErrorKind.INVALID_DIGEST_ENCODING


class SignatureMismatch(SignatureError):
    """Supplied digest does not match the MAC computed over the body."""

    kind = ErrorKind.SIGNATURE_MISMATCH

    def __init__(self, detail: str = "invalid message digest or key"):
        super().__init__(detail)

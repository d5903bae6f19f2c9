"""
Error handling for colmat.

Element access never raises: out-of-range reads give NaN and out-of-range
writes are dropped. Structural operations (construction over external
storage, shape-checked copies, decoding) raise the exceptions below.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

COLMAT_OK = 0

# General errors (1-9)
COLMAT_ERROR_UNKNOWN = 1

# Argument errors (10-19)
COLMAT_ERROR_INVALID_ARGUMENT = 10
COLMAT_ERROR_DIMENSION_MISMATCH = 11
COLMAT_ERROR_INVALID_SIZE = 12

# Storage errors (20-29)
COLMAT_ERROR_CAPACITY = 20

# Format errors (30-39)
COLMAT_ERROR_FORMAT = 30
COLMAT_ERROR_VERSION = 31
COLMAT_ERROR_TRUNCATED = 32


_ERROR_MESSAGES = {
    COLMAT_OK: "Success",
    COLMAT_ERROR_UNKNOWN: "Unknown error",
    COLMAT_ERROR_INVALID_ARGUMENT: "Invalid argument",
    COLMAT_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    COLMAT_ERROR_INVALID_SIZE: "Invalid matrix size",
    COLMAT_ERROR_CAPACITY: "Buffer capacity too small",
    COLMAT_ERROR_FORMAT: "Malformed encoding",
    COLMAT_ERROR_VERSION: "Unsupported encoding version",
    COLMAT_ERROR_TRUNCATED: "Truncated encoding",
}


# =============================================================================
# Exception Classes
# =============================================================================

class ColmatError(Exception):
    """
    Base exception for all colmat errors.

    Attributes:
        code: Numeric error code (one of the COLMAT_ERROR_* constants)
        message: Human readable message
    """

    OK = COLMAT_OK
    ERROR_UNKNOWN = COLMAT_ERROR_UNKNOWN
    ERROR_INVALID_ARGUMENT = COLMAT_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = COLMAT_ERROR_DIMENSION_MISMATCH
    ERROR_INVALID_SIZE = COLMAT_ERROR_INVALID_SIZE
    ERROR_CAPACITY = COLMAT_ERROR_CAPACITY
    ERROR_FORMAT = COLMAT_ERROR_FORMAT
    ERROR_VERSION = COLMAT_ERROR_VERSION
    ERROR_TRUNCATED = COLMAT_ERROR_TRUNCATED

    default_code = COLMAT_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"colmat error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "ColmatError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        return cls(msg, code)


class InvalidSizeError(ColmatError, ValueError):
    """Negative row or column count."""

    default_code = COLMAT_ERROR_INVALID_SIZE


class CapacityError(ColmatError, ValueError):
    """Caller supplied storage is smaller than the requested shape needs."""

    default_code = COLMAT_ERROR_CAPACITY


class ShapeMismatchError(ColmatError, ValueError):
    """Operand extents disagree."""

    default_code = COLMAT_ERROR_DIMENSION_MISMATCH


class DecodeError(ColmatError, ValueError):
    """Binary or JSON input could not be decoded."""

    default_code = COLMAT_ERROR_FORMAT

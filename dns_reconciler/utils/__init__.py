"""
Utility functions and helpers.

This package contains record canonicalization, validation and the TTL cache.
"""

from .cache import TtlCache
from .canonical import comparable_value, normalize_host, record_fingerprint
from .validators import RecordFormatError, RecordValidationError, validate_domain

__all__ = [
    "TtlCache",
    "comparable_value",
    "normalize_host",
    "record_fingerprint",
    "RecordFormatError",
    "RecordValidationError",
    "validate_domain",
]

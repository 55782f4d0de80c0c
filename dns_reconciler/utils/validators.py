"""
Validators - Input validation for DNS records

This module validates caller-supplied records before they reach the
reconciliation engine, so the engine itself only ever sees well-formed input.
"""

import ipaddress
import logging
import re
from typing import Any, Dict, Optional

from ..core.records import (
    AAAARecord,
    ARecord,
    CNAMERecord,
    DnsRecord,
    MXRecord,
    SRVRecord,
    TXTRecord,
)

logger = logging.getLogger(__name__)

MIN_TTL = 60
MAX_TTL = 86400
EXPECTED_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "SRV")


class RecordValidationError(ValueError):
    """Raised when a caller-supplied record does not match its type's schema."""


class RecordFormatError(ValueError):
    """Raised when a registrar payload cannot be derived from a record."""


def validate_fqdn(fqdn: str) -> bool:
    """
    Validate Fully Qualified Domain Name (FQDN).

    Args:
        fqdn: The FQDN to validate

    Returns:
        True if valid, False otherwise
    """
    if not fqdn or not isinstance(fqdn, str):
        return False

    if fqdn.endswith("."):
        fqdn = fqdn[:-1]

    if len(fqdn) > 253:
        logger.warning(f"FQDN too long: {fqdn}")
        return False

    labels = fqdn.split(".")

    if len(labels) < 2:
        logger.warning(f"FQDN must have at least 2 labels: {fqdn}")
        return False

    if any(label == "" for label in labels):
        logger.warning(f"FQDN contains empty labels: {fqdn}")
        return False

    for label in labels:
        if not _validate_label(label):
            logger.warning(f"Invalid label '{label}' in FQDN: {fqdn}")
            return False

    return True


def _validate_label(label: str) -> bool:
    """Letters, digits and inner hyphens, at most 63 characters."""
    if len(label) == 0 or len(label) > 63:
        return False

    return bool(re.match(r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$", label))


def validate_ipv4(ipv4: str) -> bool:
    if not ipv4 or not isinstance(ipv4, str):
        return False

    try:
        ipaddress.IPv4Address(ipv4.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv4 address: {ipv4}")
        return False


def validate_ipv6(ipv6: str) -> bool:
    if not ipv6 or not isinstance(ipv6, str):
        return False

    try:
        ipaddress.IPv6Address(ipv6.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv6 address: {ipv6}")
        return False


def validate_domain(domain: str) -> bool:
    """A registrable domain: a valid FQDN of 4..255 characters that is not an IP."""
    if not domain or not isinstance(domain, str):
        return False

    domain = domain.strip()
    if not 4 <= len(domain) <= 255:
        return False

    if not validate_fqdn(domain):
        return False

    # "1.2.3.4" is a syntactically valid FQDN
    if validate_ipv4(domain):
        return False

    return True


def validate_ttl(ttl: Any) -> bool:
    return isinstance(ttl, int) and not isinstance(ttl, bool) and MIN_TTL <= ttl <= MAX_TTL


def _require_str(raw: Dict[str, Any], key: str, record_type: str, max_len: int = 255) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise RecordValidationError(f"{record_type} record requires a non-empty '{key}'")
    if len(value) > max_len:
        raise RecordValidationError(f"{record_type} record '{key}' exceeds {max_len} characters")
    return value


def _require_int(raw: Dict[str, Any], key: str, record_type: str, low: int, high: int) -> int:
    value = raw.get(key)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:
        raise RecordValidationError(
            f"{record_type} record requires integer '{key}' between {low} and {high}, got {raw.get(key)!r}"
        )
    return value


def _optional_ttl(raw: Dict[str, Any]) -> Optional[int]:
    ttl = raw.get("ttl")
    if ttl is None or ttl == "":
        return None
    if isinstance(ttl, str) and ttl.strip().isdigit():
        ttl = int(ttl.strip())
    if not validate_ttl(ttl):
        raise RecordValidationError(f"TTL must be an integer between {MIN_TTL} and {MAX_TTL}, got {raw.get('ttl')!r}")
    return ttl


def expected_to_record(raw: Dict[str, Any]) -> DnsRecord:
    """
    Validate an expected record mapping and convert it to a record.

    Args:
        raw: Mapping with ``type``, ``name`` and the type's required fields

    Returns:
        The typed record

    Raises:
        RecordValidationError: If the mapping does not satisfy its type's schema
    """
    record_type = str(raw.get("type", "")).strip().upper()
    if record_type not in EXPECTED_TYPES:
        raise RecordValidationError(
            f"Unsupported expected record type {raw.get('type')!r}; expected one of {', '.join(EXPECTED_TYPES)}"
        )

    name = _require_str(raw, "name", record_type)
    ttl = _optional_ttl(raw)

    if record_type == "A":
        address = _require_str(raw, "address", record_type, max_len=45)
        if not validate_ipv4(address):
            raise RecordValidationError(f"A record requires an IPv4 address, got {address!r}")
        return ARecord(name=name, ttl=ttl, address=address)

    if record_type == "AAAA":
        address = _require_str(raw, "address", record_type, max_len=45)
        if not validate_ipv6(address):
            raise RecordValidationError(f"AAAA record requires an IPv6 address, got {address!r}")
        return AAAARecord(name=name, ttl=ttl, address=address)

    if record_type == "CNAME":
        return CNAMERecord(name=name, ttl=ttl, cname=_require_str(raw, "cname", record_type))

    if record_type == "MX":
        return MXRecord(
            name=name,
            ttl=ttl,
            exchange=_require_str(raw, "exchange", record_type),
            preference=_require_int(raw, "preference", record_type, 0, 65535),
        )

    if record_type == "TXT":
        return TXTRecord(name=name, ttl=ttl, value=_require_str(raw, "value", record_type, max_len=65535))

    return SRVRecord(
        name=name,
        ttl=ttl,
        service=_require_str(raw, "service", record_type, max_len=63),
        protocol=_require_str(raw, "protocol", record_type, max_len=63),
        priority=_require_int(raw, "priority", record_type, 0, 65535),
        weight=_require_int(raw, "weight", record_type, 0, 65535),
        port=_require_int(raw, "port", record_type, 1, 65535),
        target=_require_str(raw, "target", record_type),
    )

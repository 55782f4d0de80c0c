"""
Canonical forms for DNS records.

Two records describe the same logical record when their type, normalized
owner name and canonical value agree. The helpers here compute those
projections; they are pure and never raise for well-formed records.
"""

from typing import Any, Dict, Iterable, Optional

from ..core.records import (
    AAAARecord,
    ALIASRecord,
    ARecord,
    CAARecord,
    CNAMERecord,
    DnsRecord,
    HTTPSRecord,
    MXRecord,
    NSRecord,
    PTRRecord,
    SRVRecord,
    TLSARecord,
    TXTRecord,
)

_TRAILING = " \t\r\n."


def normalize_host(value: Optional[str]) -> str:
    """Lowercase a hostname and drop surrounding whitespace and trailing dots."""
    if not value:
        return ""
    return str(value).lstrip().rstrip(_TRAILING).lower()


# Owner names and domains follow the same rules as hostnames.
normalize_name = normalize_host
normalize_domain = normalize_host


def _text(value: Any) -> str:
    """Serialize one payload field; missing fields become an empty segment."""
    return "" if value is None else str(value)


def _number(value: Any) -> str:
    """Like ``_text`` but "010" and "10" serialize the same."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            return str(int(stripped))
    return _text(value)


def _first(*candidates: Optional[str]) -> Optional[str]:
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def comparable_value(record: DnsRecord) -> str:
    """Deterministic encoding of a record's type-specific payload."""
    # SVCBRecord subclasses HTTPSRecord, so one branch covers both.
    if isinstance(record, (ARecord, AAAARecord)):
        return str(record.address or "").strip()
    if isinstance(record, CNAMERecord):
        return normalize_host(record.cname)
    if isinstance(record, ALIASRecord):
        return normalize_host(record.alias_name)
    if isinstance(record, NSRecord):
        return normalize_host(record.nameserver)
    if isinstance(record, PTRRecord):
        return normalize_host(record.pointer)
    if isinstance(record, MXRecord):
        preference = -1 if record.preference is None else record.preference
        return f"{_number(preference)}:{normalize_host(record.exchange)}"
    if isinstance(record, TXTRecord):
        return "" if record.value is None else str(record.value)
    if isinstance(record, SRVRecord):
        return ":".join(
            [
                _text(record.service),
                _text(record.protocol),
                _number(record.priority),
                _number(record.weight),
                _number(record.port),
                normalize_host(record.target),
            ]
        )
    if isinstance(record, CAARecord):
        flag = 0 if record.flag is None else record.flag
        return f"{_number(flag)}:{_text(record.tag)}:{_text(record.value)}"
    if isinstance(record, HTTPSRecord):
        return ":".join(
            [
                _number(record.svc_priority),
                normalize_host(record.target_name),
                _text(record.svc_params),
                _number(record.port),
                _text(record.scheme),
            ]
        )
    if isinstance(record, TLSARecord):
        association = "".join(str(record.association_data or "").split()).lower()
        return ":".join(
            [
                _number(record.port),
                _text(record.protocol),
                _number(record.usage),
                _number(record.selector),
                _number(record.matching),
                association,
            ]
        )
    return ""


def record_fingerprint(record: DnsRecord, include_ttl: bool = False) -> str:
    """``type|name|value|ttl`` key; the ttl segment is empty unless requested."""
    ttl = ""
    if include_ttl and record.ttl is not None:
        ttl = str(record.ttl)
    return f"{record.type}|{normalize_name(record.name)}|{comparable_value(record)}|{ttl}"


def conflict_key(record: DnsRecord) -> str:
    """Key shared by records that occupy the same (name, type) slot."""
    return f"{normalize_name(record.name)}|{record.type}"


def extract_comparable_fields(record: DnsRecord) -> Dict[str, Any]:
    """Reduce a record to the fields that matter for its type, plus ttl."""
    result: Dict[str, Any] = {"type": record.type, "name": record.name, "ttl": record.ttl}

    if isinstance(record, (ARecord, AAAARecord)):
        result["address"] = record.address
    elif isinstance(record, CNAMERecord):
        result["cname"] = record.cname
    elif isinstance(record, ALIASRecord):
        result["aliasName"] = record.alias_name
    elif isinstance(record, NSRecord):
        result["nameserver"] = record.nameserver
    elif isinstance(record, PTRRecord):
        result["pointer"] = record.pointer
    elif isinstance(record, MXRecord):
        result["exchange"] = record.exchange
        result["preference"] = record.preference
    elif isinstance(record, TXTRecord):
        result["value"] = record.value
    elif isinstance(record, SRVRecord):
        result.update(
            service=record.service,
            protocol=record.protocol,
            priority=record.priority,
            weight=record.weight,
            port=record.port,
            target=record.target,
        )
    elif isinstance(record, CAARecord):
        result.update(flag=record.flag, tag=record.tag, value=record.value)
    elif isinstance(record, HTTPSRecord):
        result.update(
            svcPriority=record.svc_priority,
            targetName=record.target_name,
            svcParams=record.svc_params,
            port=record.port,
            scheme=record.scheme,
        )
    elif isinstance(record, TLSARecord):
        result.update(
            port=record.port,
            protocol=record.protocol,
            usage=record.usage,
            selector=record.selector,
            matching=record.matching,
            associationData=record.association_data,
            scheme=record.scheme,
        )

    return result


def summarize_by_type(records: Iterable[DnsRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for record in records:
        counts[record.type] = counts.get(record.type, 0) + 1
    return counts


def host_fields(record: DnsRecord) -> str:
    """Hostname-bearing payload of a record joined into one lowercase string."""
    candidates = []
    if isinstance(record, CNAMERecord):
        candidates.append(_first(record.cname, record.value))
    elif isinstance(record, ALIASRecord):
        candidates.append(_first(record.alias_name, record.value))
    elif isinstance(record, MXRecord):
        candidates.append(record.exchange)
    elif isinstance(record, SRVRecord):
        candidates.append(record.target)
    elif isinstance(record, TXTRecord):
        candidates.append(record.value)
    return " ".join(str(c) for c in candidates if c).lower()

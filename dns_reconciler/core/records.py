"""
DNS record model.

Registrar responses and caller input arrive as loosely-typed mappings with
camelCase keys. This module turns them into one dataclass per record type so
the rest of the package can reason about every type explicitly, with
``UnknownRecord`` as the forward-compatible fallback.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Type, Union

logger = logging.getLogger(__name__)

# Numeric payload fields may arrive as ints or as strings ("10", "_443").
Numeric = Union[int, str]


@dataclass(frozen=True)
class DnsRecord:
    """Fields shared by every record type."""

    RECORD_TYPE: ClassVar[str] = ""

    name: str
    ttl: Optional[int] = None

    @property
    def type(self) -> str:
        return self.RECORD_TYPE


@dataclass(frozen=True)
class ARecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "A"

    address: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class AAAARecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "AAAA"

    address: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class CNAMERecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "CNAME"

    cname: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class ALIASRecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "ALIAS"

    alias_name: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class NSRecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "NS"

    nameserver: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class PTRRecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "PTR"

    pointer: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class MXRecord(DnsRecord):
    """Mail exchange. ``priority`` is accepted as an alias for ``preference``."""

    RECORD_TYPE: ClassVar[str] = "MX"

    preference: Optional[Numeric] = None
    exchange: Optional[str] = None
    priority: Optional[Numeric] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class TXTRecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "TXT"

    value: Optional[str] = None


@dataclass(frozen=True)
class SRVRecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "SRV"

    service: Optional[str] = None
    protocol: Optional[str] = None
    priority: Optional[Numeric] = None
    weight: Optional[Numeric] = None
    port: Optional[Numeric] = None
    target: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class CAARecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "CAA"

    flag: Optional[Numeric] = None
    tag: Optional[str] = None
    value: Optional[str] = None


@dataclass(frozen=True)
class HTTPSRecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "HTTPS"

    svc_priority: Optional[Numeric] = None
    target_name: Optional[str] = None
    svc_params: Optional[str] = None
    port: Optional[Numeric] = None
    scheme: Optional[str] = None


@dataclass(frozen=True)
class SVCBRecord(HTTPSRecord):
    RECORD_TYPE: ClassVar[str] = "SVCB"


@dataclass(frozen=True)
class TLSARecord(DnsRecord):
    RECORD_TYPE: ClassVar[str] = "TLSA"

    port: Optional[Numeric] = None
    protocol: Optional[str] = None
    usage: Optional[Numeric] = None
    selector: Optional[Numeric] = None
    matching: Optional[Numeric] = None
    association_data: Optional[str] = None
    scheme: Optional[str] = None


@dataclass(frozen=True)
class UnknownRecord(DnsRecord):
    """Any record type this package does not model explicitly."""

    record_type: str = "UNKNOWN"
    value: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def type(self) -> str:
        return self.record_type.upper()


@dataclass(frozen=True)
class RecordTarget:
    """A (name, type) pair naming every record it matches, used for deletes."""

    name: str
    type: str


RECORD_CLASSES: Dict[str, Type[DnsRecord]] = {
    cls.RECORD_TYPE: cls
    for cls in (
        ARecord,
        AAAARecord,
        CNAMERecord,
        ALIASRecord,
        NSRecord,
        PTRRecord,
        MXRecord,
        TXTRecord,
        SRVRecord,
        CAARecord,
        HTTPSRecord,
        SVCBRecord,
        TLSARecord,
    )
}

KNOWN_TYPES = frozenset(RECORD_CLASSES)

# Registrar payload key -> dataclass attribute, where they differ.
_WIRE_TO_ATTR = {
    "aliasName": "alias_name",
    "svcPriority": "svc_priority",
    "targetName": "target_name",
    "svcParams": "svc_params",
    "associationData": "association_data",
}
_ATTR_TO_WIRE = {attr: wire for wire, attr in _WIRE_TO_ATTR.items()}

_NUMERIC_ATTRS = frozenset(
    {
        "ttl",
        "preference",
        "priority",
        "weight",
        "port",
        "flag",
        "svc_priority",
        "usage",
        "selector",
        "matching",
    }
)


def _coerce_numeric(value: Any) -> Any:
    """Turn digit strings into ints; leave everything else alone."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    return value


def record_from_dict(raw: Dict[str, Any]) -> DnsRecord:
    """Build the matching record variant from a registrar or caller mapping."""
    if "type" not in raw or "name" not in raw:
        raise ValueError(f"DNS record requires 'type' and 'name': {raw!r}")

    record_type = str(raw["type"]).strip().upper()
    cls = RECORD_CLASSES.get(record_type, UnknownRecord)
    attrs = {f.name for f in fields(cls)}

    kwargs: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, value in raw.items():
        if key == "type":
            continue
        attr = _WIRE_TO_ATTR.get(key, key)
        if attr in attrs and attr not in ("record_type", "extra"):
            if value is not None and attr in _NUMERIC_ATTRS:
                value = _coerce_numeric(value)
            kwargs[attr] = value
        else:
            extra[key] = value

    if cls is UnknownRecord:
        kwargs["record_type"] = record_type
        kwargs["extra"] = extra
    elif extra:
        logger.debug(f"Ignoring fields {sorted(extra)} on {record_type} record")

    return cls(**kwargs)


def record_to_dict(record: DnsRecord) -> Dict[str, Any]:
    """Registrar-style mapping for a record, omitting unset fields."""
    result: Dict[str, Any] = {"type": record.type, "name": record.name}
    for f in fields(record):
        if f.name in ("name", "record_type", "extra"):
            continue
        value = getattr(record, f.name)
        if value is not None:
            result[_ATTR_TO_WIRE.get(f.name, f.name)] = value
    if isinstance(record, UnknownRecord):
        for key, value in record.extra.items():
            result.setdefault(key, value)
    return result


def records_from_dicts(items: Iterable[Dict[str, Any]]) -> List[DnsRecord]:
    return [record_from_dict(item) for item in items]

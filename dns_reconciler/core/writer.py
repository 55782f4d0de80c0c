"""
Conflict-Aware Writer - Apply record upserts and deletes safely

The registrar refuses to write a record into a (name, type) slot that is
already occupied, and deletes need full record bodies. The writer fetches the
current state, removes colliding records, then force-writes the batch. Calls
are issued strictly in sequence: fetch, then delete, then write.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .fingerprint_index import FingerprintIndex
from .records import (
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
    RecordTarget,
    SRVRecord,
    TLSARecord,
    TXTRecord,
    UnknownRecord,
)
from ..utils.canonical import conflict_key, normalize_name
from ..utils.validators import RecordFormatError

logger = logging.getLogger(__name__)


def _parse_int(text: str, what: str, raw: str) -> int:
    try:
        return int(text, 10)
    except ValueError:
        raise RecordFormatError(f"Invalid {what} '{text}' in: {raw}")


def _service_protocol(name: str) -> Optional[List[str]]:
    """Split a ``_service._protocol[...]`` owner name, or None if it isn't one."""
    parts = name.split(".")
    if len(parts) >= 2 and parts[0].startswith("_") and parts[1].startswith("_"):
        return parts[:2]
    return None


def _mx_fields(record: MXRecord) -> Dict[str, Any]:
    if record.preference is not None and record.exchange:
        return {"preference": record.preference, "exchange": record.exchange}
    if record.priority is not None and record.exchange:
        return {"preference": record.priority, "exchange": record.exchange}
    if record.value:
        parts = record.value.split()
        if len(parts) < 2:
            raise RecordFormatError(
                f'Invalid MX record format. Expected "priority exchange" but got: {record.value}'
            )
        return {
            "preference": _parse_int(parts[0], "MX priority", record.value),
            "exchange": " ".join(parts[1:]),
        }
    raise RecordFormatError("MX record must have preference/exchange or value field")


def _srv_fields(record: SRVRecord) -> Dict[str, Any]:
    structured = (
        record.priority is not None
        and record.weight is not None
        and record.port is not None
        and record.target
    )
    if structured:
        service_protocol = _service_protocol(record.name) or ["", ""]
        return {
            "service": record.service or service_protocol[0],
            "protocol": record.protocol or service_protocol[1],
            "priority": record.priority,
            "weight": record.weight,
            "port": record.port,
            "target": record.target,
        }

    if not record.value:
        raise RecordFormatError("SRV record must have priority/weight/port/target or value field")

    parts = record.value.split()
    if len(parts) < 4:
        raise RecordFormatError(
            f'Invalid SRV record format. Expected "priority weight port target" but got: {record.value}'
        )
    service_protocol = _service_protocol(record.name)
    if service_protocol is None:
        raise RecordFormatError(
            f"Invalid SRV record name format. Expected _service._protocol but got: {record.name}"
        )
    return {
        "service": service_protocol[0],
        "protocol": service_protocol[1],
        "priority": _parse_int(parts[0], "SRV priority", record.value),
        "weight": _parse_int(parts[1], "SRV weight", record.value),
        "port": _parse_int(parts[2], "SRV port", record.value),
        "target": parts[3],
    }


def build_record_payload(record: DnsRecord) -> Dict[str, Any]:
    """
    Build the registrar body for a record.

    Free-text ``value`` fields are split into structured fields where the
    registrar needs them (MX, SRV).

    Raises:
        RecordFormatError: If required sub-fields cannot be derived
    """
    item: Dict[str, Any] = {"name": record.name, "type": record.type}
    if record.ttl is not None:
        item["ttl"] = record.ttl

    if isinstance(record, MXRecord):
        item.update(_mx_fields(record))
    elif isinstance(record, SRVRecord):
        item.update(_srv_fields(record))
    elif isinstance(record, (ARecord, AAAARecord)):
        item["address"] = record.address or record.value
    elif isinstance(record, CNAMERecord):
        item["cname"] = record.cname or record.value
    elif isinstance(record, ALIASRecord):
        item["aliasName"] = record.alias_name or record.value
    elif isinstance(record, NSRecord):
        item["nameserver"] = record.nameserver or record.value
    elif isinstance(record, PTRRecord):
        item["pointer"] = record.pointer or record.value
    elif isinstance(record, CAARecord):
        item.update(flag=record.flag, tag=record.tag, value=record.value)
    elif isinstance(record, HTTPSRecord):
        item.update(
            svcPriority=record.svc_priority,
            targetName=record.target_name,
            svcParams=record.svc_params,
            port=record.port,
            scheme=record.scheme,
        )
    elif isinstance(record, TLSARecord):
        item.update(
            port=record.port,
            protocol=record.protocol,
            usage=record.usage,
            selector=record.selector,
            matching=record.matching,
            associationData=record.association_data,
            scheme=record.scheme,
        )
    elif isinstance(record, (TXTRecord, UnknownRecord)):
        item["value"] = record.value

    return {key: value for key, value in item.items() if value is not None}


@dataclass
class WriteResult:
    written: List[DnsRecord] = field(default_factory=list)
    deleted: List[DnsRecord] = field(default_factory=list)


class ConflictAwareWriter:
    """Applies upserts and deletes through a DNS client."""

    def __init__(self, dns_client):
        """Initialize writer with a client exposing fetch/put/delete."""
        self.dns_client = dns_client

    async def save(self, domain: str, records: Iterable[DnsRecord]) -> WriteResult:
        """Write ``records``, deleting any existing records in the same slots first."""
        records = list(records)
        if not records:
            logger.info(f"No records to save for {domain}")
            return WriteResult()

        # Validate the whole batch before touching the network
        payloads = [build_record_payload(record) for record in records]

        existing = await self.dns_client.fetch_all_records(domain)
        slots = list(dict.fromkeys(conflict_key(record) for record in records))
        index = FingerprintIndex.by_name_and_type(existing)
        conflicts = [record for slot in slots for record in index.get(slot)]

        if conflicts:
            logger.info(f"Deleting {len(conflicts)} conflicting records on {domain} before write")
            await self.dns_client.delete_records(
                domain, [build_record_payload(record) for record in conflicts]
            )
        else:
            logger.info(f"No conflicting records on {domain}")

        await self.dns_client.put_records(domain, payloads, force=True)
        logger.info(f"Saved {len(records)} records to {domain}")
        return WriteResult(written=records, deleted=conflicts)

    async def delete(self, domain: str, targets: Iterable[RecordTarget]) -> List[DnsRecord]:
        """Delete every existing record matching any (name, type) target."""
        wanted = {f"{normalize_name(t.name)}|{t.type.strip().upper()}" for t in targets}

        existing = await self.dns_client.fetch_all_records(domain)
        resolved = [record for record in existing if conflict_key(record) in wanted]

        if not resolved:
            logger.info(f"No records on {domain} match the delete targets")
            return []

        await self.dns_client.delete_records(
            domain, [build_record_payload(record) for record in resolved]
        )
        logger.info(f"Deleted {len(resolved)} records from {domain}")
        return resolved

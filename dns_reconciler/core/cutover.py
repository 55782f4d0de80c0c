"""
Cutover Planner - Plan a root/www hosting migration

Only A, AAAA, CNAME and ALIAS records at ``@`` and ``www`` are in scope.
Everything else is reported as a per-type count and never deleted. Planning
is read-only; applying the plan is left to the caller.
"""

import ipaddress
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from .fingerprint_index import FingerprintIndex
from .records import AAAARecord, ARecord, CNAMERecord, DnsRecord
from ..utils.canonical import (
    extract_comparable_fields,
    host_fields,
    normalize_name,
    summarize_by_type,
)

logger = logging.getLogger(__name__)

CUTOVER_TYPES: FrozenSet[str] = frozenset({"A", "AAAA", "CNAME", "ALIAS"})
CUTOVER_NAMES: FrozenSet[str] = frozenset({"@", "www"})
DEFAULT_CUTOVER_TTL = 3600


@dataclass(frozen=True)
class HostingSignatures:
    """Lookup table of addresses and host markers known to belong to a host."""

    provider: str = "vercel"
    version: str = "1"
    exact_addresses: FrozenSet[str] = frozenset({"76.76.21.21"})
    networks: FrozenSet[str] = frozenset({"216.198.79.0/24"})
    host_markers: FrozenSet[str] = frozenset({"vercel"})

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "HostingSignatures":
        """Build signatures from config, falling back to the defaults per key."""
        if not config:
            return cls()
        defaults = cls()
        return cls(
            provider=config.get("provider", defaults.provider),
            version=str(config.get("version", defaults.version)),
            exact_addresses=frozenset(config.get("exact_addresses", defaults.exact_addresses)),
            networks=frozenset(config.get("networks", defaults.networks)),
            host_markers=frozenset(m.lower() for m in config.get("host_markers", defaults.host_markers)),
        )

    def matches_address(self, address: Optional[str]) -> bool:
        if not address:
            return False
        address = address.strip()
        if address in self.exact_addresses:
            return True
        try:
            ip = ipaddress.ip_address(address)
        except ValueError:
            return False
        for network in self.networks:
            if ip in ipaddress.ip_network(network, strict=False):
                return True
        return False

    def matches_host(self, text: str) -> bool:
        return any(marker in text for marker in self.host_markers)

    def matches(self, record: DnsRecord) -> bool:
        if isinstance(record, ARecord) and self.matches_address(record.address):
            return True
        return self.matches_host(host_fields(record))


@dataclass
class CutoverPlan:
    upserts: List[DnsRecord] = field(default_factory=list)
    deletes: List[DnsRecord] = field(default_factory=list)
    likely_third_party_managed: bool = False
    current: List[DnsRecord] = field(default_factory=list)
    other_records_by_type: Dict[str, int] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.upserts or self.deletes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "upserts": [extract_comparable_fields(r) for r in self.upserts],
            "deletes": [extract_comparable_fields(r) for r in self.deletes],
            "likelyThirdPartyManaged": self.likely_third_party_managed,
            "currentRootWww": [extract_comparable_fields(r) for r in self.current],
            "otherRecordsByType": dict(self.other_records_by_type),
        }


def is_cutover_record(record: DnsRecord) -> bool:
    return record.type in CUTOVER_TYPES and normalize_name(record.name) in CUTOVER_NAMES


class CutoverPlanner:
    """Computes upserts and deletes that move root/www to new targets."""

    def __init__(self, signatures: Optional[HostingSignatures] = None, ttl: int = DEFAULT_CUTOVER_TTL):
        self.signatures = signatures or HostingSignatures()
        self.ttl = ttl

    def desired_records(
        self,
        desired_a: Optional[str] = None,
        desired_aaaa: Optional[str] = None,
        desired_cname: Optional[str] = None,
    ) -> List[DnsRecord]:
        desired: List[DnsRecord] = []
        if desired_a:
            desired.append(ARecord(name="@", ttl=self.ttl, address=desired_a.strip()))
        if desired_aaaa:
            desired.append(AAAARecord(name="@", ttl=self.ttl, address=desired_aaaa.strip()))
        if desired_cname:
            desired.append(CNAMERecord(name="www", ttl=self.ttl, cname=desired_cname.strip()))
        return desired

    def is_third_party_managed(self, records: Iterable[DnsRecord]) -> bool:
        return any(self.signatures.matches(record) for record in records)

    def plan(
        self,
        actual: Iterable[DnsRecord],
        desired_a: Optional[str] = None,
        desired_aaaa: Optional[str] = None,
        desired_cname: Optional[str] = None,
    ) -> CutoverPlan:
        actual = list(actual)
        current = [r for r in actual if is_cutover_record(r)]
        others = [r for r in actual if not is_cutover_record(r)]
        desired = self.desired_records(desired_a, desired_aaaa, desired_cname)

        current_index = FingerprintIndex.by_fingerprint(current)
        desired_index = FingerprintIndex.by_fingerprint(desired)

        plan = CutoverPlan(
            upserts=[r for r in desired if current_index.key_for(r) not in current_index],
            deletes=[r for r in current if desired_index.key_for(r) not in desired_index],
            likely_third_party_managed=self.is_third_party_managed(current),
            current=current,
            other_records_by_type=summarize_by_type(others),
        )

        logger.info(
            f"Cutover plan: {len(plan.upserts)} upserts, {len(plan.deletes)} deletes, "
            f"{len(others)} records out of scope"
        )
        if plan.likely_third_party_managed:
            logger.warning(
                f"Root/www records look managed by {self.signatures.provider}; "
                "review before applying"
            )
        return plan

"""
Record Reconciler - Compare expected DNS records with the registrar's state

Matching is by exact fingerprint only. A record either has a canonical twin
on the other side or it is reported; there is no "closest match" pairing.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

from .fingerprint_index import FingerprintIndex
from .records import DnsRecord
from ..utils.canonical import extract_comparable_fields, record_fingerprint, summarize_by_type

logger = logging.getLogger(__name__)

DEFAULT_TYPES: FrozenSet[str] = frozenset({"A", "AAAA", "CNAME", "MX", "TXT", "SRV"})
EXTENDED_TYPES: FrozenSet[str] = DEFAULT_TYPES | {
    "ALIAS",
    "CAA",
    "HTTPS",
    "SVCB",
    "NS",
    "PTR",
    "TLSA",
}


@dataclass
class AlignmentResult:
    """Classification of both sides of a diff."""

    missing: List[DnsRecord] = field(default_factory=list)
    unexpected: List[DnsRecord] = field(default_factory=list)
    matched_expected: List[DnsRecord] = field(default_factory=list)
    matched_actual: List[DnsRecord] = field(default_factory=list)
    duplicates: Dict[str, int] = field(default_factory=dict)

    @property
    def aligned(self) -> bool:
        return not self.missing and not self.unexpected


class RecordReconciler:
    """Diffs an expected record set against an actual one."""

    def diff(
        self,
        expected: Iterable[DnsRecord],
        actual: Iterable[DnsRecord],
        include_ttl_in_match: bool = False,
        types_to_consider: Optional[Iterable[str]] = None,
    ) -> AlignmentResult:
        """
        Classify expected records as matched/missing and actual records as
        matched/unexpected.

        Args:
            expected: Records the caller wants to exist
            actual: Snapshot of the registrar's records
            include_ttl_in_match: Treat a TTL difference as a different record
            types_to_consider: Actual records of other types are ignored

        Returns:
            AlignmentResult with every input record in exactly one bucket
        """
        considered: Set[str] = {
            t.upper() for t in (DEFAULT_TYPES if types_to_consider is None else types_to_consider)
        }
        actual_filtered = [record for record in actual if record.type in considered]
        index = FingerprintIndex.by_fingerprint(actual_filtered, include_ttl_in_match)

        result = AlignmentResult()
        matched: Set[str] = set()

        for record in expected:
            key = record_fingerprint(record, include_ttl_in_match)
            if key in index:
                matched.add(key)
                result.matched_expected.append(record)
            else:
                result.missing.append(record)
                logger.info(f"Missing: {key}")

        for record in actual_filtered:
            key = index.key_for(record)
            if key in matched:
                result.matched_actual.append(record)
            else:
                result.unexpected.append(record)
                logger.info(f"Unexpected: {key}")

        result.duplicates = {key: len(bucket) for key, bucket in index.duplicates().items()}
        for key, count in result.duplicates.items():
            logger.warning(f"{count} actual records share fingerprint {key}")

        logger.info(
            f"Alignment check complete: {len(result.matched_expected)} matched, "
            f"{len(result.missing)} missing, {len(result.unexpected)} unexpected"
        )
        return result

    def build_report(
        self,
        domain: str,
        expected: List[DnsRecord],
        result: AlignmentResult,
        include_ttl_in_match: bool = False,
        types_to_consider: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        """Serializable alignment report for one domain."""
        types = sorted(DEFAULT_TYPES if types_to_consider is None else {t.upper() for t in types_to_consider})
        return {
            "domain": domain,
            "includeTtlInMatch": include_ttl_in_match,
            "typesConsidered": types,
            "expectedCount": len(expected),
            "missingCount": len(result.missing),
            "unexpectedCount": len(result.unexpected),
            "missing": [extract_comparable_fields(r) for r in result.missing],
            "unexpected": [extract_comparable_fields(r) for r in result.unexpected],
            "unexpectedByType": summarize_by_type(result.unexpected),
        }

"""
Core DNS reconciliation functionality.

This package contains the record model, the reconciliation engine, the
cutover planner and the conflict-aware writer.
"""

from .records import DnsRecord, RecordTarget, record_from_dict, record_to_dict
from .fingerprint_index import FingerprintIndex
from .reconciler import AlignmentResult, RecordReconciler
from .cutover import CutoverPlan, CutoverPlanner, HostingSignatures
from .writer import ConflictAwareWriter, build_record_payload
from .dns_manager import DNSManager

__all__ = [
    "DnsRecord",
    "RecordTarget",
    "record_from_dict",
    "record_to_dict",
    "FingerprintIndex",
    "AlignmentResult",
    "RecordReconciler",
    "CutoverPlan",
    "CutoverPlanner",
    "HostingSignatures",
    "ConflictAwareWriter",
    "build_record_payload",
    "DNSManager",
]

"""
Mock DNS provider for testing and demonstration.

This module provides a mock registrar that stores records in memory for safe
testing and demonstration purposes. Every call is recorded in ``calls``.
"""

import copy
import logging
from typing import Dict, List, Optional, Tuple

from .base_provider import DNSProvider, DNSProviderError, Payload
from ..core.records import record_from_dict
from ..utils.canonical import conflict_key, normalize_domain, record_fingerprint

logger = logging.getLogger(__name__)


def _slot(item: Payload) -> str:
    return conflict_key(record_from_dict(item))


def _fingerprint(item: Payload) -> str:
    return record_fingerprint(record_from_dict(item), include_ttl=False)


class MockDNSProvider(DNSProvider):
    """Mock registrar provider for testing and demonstration purposes."""

    def __init__(self, config: Optional[Dict] = None):
        """Initialize mock provider, optionally seeded from ``config['records']``."""
        config = config or {}
        self.records: Dict[str, List[Payload]] = {}
        self.calls: List[Tuple[str, str, object]] = []
        for domain, items in (config.get("records") or {}).items():
            self.records[normalize_domain(domain)] = [dict(item) for item in items]
        logger.info("Mock DNS provider initialized")

    def mutation_calls(self) -> List[Tuple[str, str, object]]:
        return [call for call in self.calls if call[0] != "list"]

    async def list_records(
        self, domain: str, take: int, skip: int, order_by: Optional[str] = None
    ) -> Tuple[List[Payload], int]:
        self.calls.append(("list", domain, {"take": take, "skip": skip, "orderBy": order_by}))
        items = self.records.get(domain, [])
        if order_by:
            field = order_by.lstrip("-")
            items = sorted(items, key=lambda r: str(r.get(field, "")), reverse=order_by.startswith("-"))
        page = copy.deepcopy(items[skip : skip + take])
        logger.info(f"Mock: Retrieved {len(page)} of {len(items)} records for {domain}")
        return page, len(items)

    async def put_records(self, domain: str, items: List[Payload], force: bool = True) -> None:
        self.calls.append(("put", domain, {"force": force, "items": copy.deepcopy(items)}))
        existing = self.records.setdefault(domain, [])
        incoming = {_slot(item) for item in items}

        clashes = [r for r in existing if _slot(r) in incoming]
        if clashes and not force:
            raise DNSProviderError(
                "Mock: records already exist", status=422, details=[_slot(r) for r in clashes]
            )

        existing[:] = [r for r in existing if _slot(r) not in incoming]
        existing.extend(copy.deepcopy(items))
        logger.info(f"Mock: Wrote {len(items)} records to {domain}")

    async def delete_records(self, domain: str, items: List[Payload]) -> None:
        self.calls.append(("delete", domain, copy.deepcopy(items)))
        doomed = {_fingerprint(item) for item in items}
        existing = self.records.get(domain, [])
        before = len(existing)
        existing[:] = [r for r in existing if _fingerprint(r) not in doomed]
        logger.info(f"Mock: Deleted {before - len(existing)} records from {domain}")

"""
DNS Client - Unified, cache-fronted interface to the registrar provider

Reads of a domain's full record list are cached under ``dns:{domain}:...``;
every successful mutation evicts that domain's DNS entries so the next read
sees the registrar's current state.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from .base_provider import DNSProvider, Payload
from .mock_provider import MockDNSProvider
from .spaceship_provider import SpaceshipProvider
from ..core.records import DnsRecord, records_from_dicts
from ..utils.cache import DEFAULT_TTL_SECONDS, TtlCache

logger = logging.getLogger(__name__)

PAGE_SIZE = 500


def dns_cache_key(domain: str, qualifier: str = "") -> str:
    return f"dns:{domain}:{qualifier}"


class DNSClient:
    """Unified DNS client that fronts the configured provider with a cache."""

    def __init__(
        self,
        config: Dict,
        provider: Optional[DNSProvider] = None,
        cache: Optional[TtlCache] = None,
    ):
        """Initialize DNS client with configuration."""
        self.config = config
        self.provider = provider or self._get_provider()

        cache_ttl = (config.get("cache") or {}).get("ttl", DEFAULT_TTL_SECONDS)
        self.caching_enabled = cache_ttl != 0
        self.cache = cache if cache is not None else TtlCache(cache_ttl or DEFAULT_TTL_SECONDS)

    def _get_provider(self) -> DNSProvider:
        """Get DNS provider based on configuration."""
        provider_name = self.config.get("default_provider", "spaceship")
        provider_config = self.config.get("dns_providers", {}).get(provider_name, {}) or {}

        if provider_name == "spaceship":
            return SpaceshipProvider(provider_config)
        elif provider_name == "mock":
            return MockDNSProvider(provider_config)
        else:
            logger.warning(f"Unknown provider '{provider_name}', using mock provider")
            return MockDNSProvider()

    async def _cached(self, key: str, fetcher: Callable[[], Awaitable[Any]], ttl: Optional[float] = None) -> Any:
        if not self.caching_enabled:
            return await fetcher()

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached

        result = await fetcher()
        self.cache.set(key, result, ttl)
        return result

    async def list_records_page(
        self, domain: str, take: int = PAGE_SIZE, skip: int = 0, order_by: Optional[str] = None
    ) -> Tuple[List[DnsRecord], int]:
        """Get a single uncached page of records."""
        items, total = await self.provider.list_records(domain, take, skip, order_by)
        return records_from_dicts(items), total

    async def _fetch_all_payloads(self, domain: str, order_by: Optional[str]) -> Tuple[Payload, ...]:
        items: List[Payload] = []
        skip = 0
        total: Optional[int] = None

        while total is None or skip < total:
            page, total = await self.provider.list_records(domain, PAGE_SIZE, skip, order_by)
            items.extend(page)
            skip += len(page)
            if not page:
                break

        logger.info(f"Fetched {len(items)} records for {domain}")
        return tuple(items)

    async def fetch_all_records(self, domain: str, order_by: Optional[str] = None) -> List[DnsRecord]:
        """Get every record for a domain, paginating and consulting the cache."""
        payloads = await self._cached(
            dns_cache_key(domain, order_by or ""),
            lambda: self._fetch_all_payloads(domain, order_by),
        )
        return records_from_dicts(payloads)

    async def put_records(self, domain: str, items: List[Payload], force: bool = True) -> None:
        try:
            await self.provider.put_records(domain, items, force=force)
        finally:
            self._invalidate(domain)

    async def delete_records(self, domain: str, items: List[Payload]) -> None:
        try:
            await self.provider.delete_records(domain, items)
        finally:
            self._invalidate(domain)

    def _invalidate(self, domain: str) -> None:
        # Trailing colon keeps "dns:example.com" from matching "dns:example.com.au"
        self.cache.invalidate(dns_cache_key(domain))

    async def aclose(self) -> None:
        await self.provider.aclose()

    async def __aenter__(self) -> "DNSClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

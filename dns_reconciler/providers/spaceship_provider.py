"""
Spaceship DNS provider implementation.

This module talks to the Spaceship registrar REST API using httpx.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from .base_provider import DNSProvider, DNSProviderError, Payload

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://spaceship.dev/api"
DEFAULT_TIMEOUT = 30.0


class SpaceshipProvider(DNSProvider):
    """Spaceship registrar provider backed by an async httpx client."""

    def __init__(self, config: Dict, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize Spaceship provider."""
        self.config = config
        self.api_key = config.get("api_key", "")
        self.api_secret = config.get("api_secret", "")
        self.base_url = (config.get("base_url") or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = float(config.get("timeout", DEFAULT_TIMEOUT))

        if not self.api_key or not self.api_secret:
            logger.warning("Spaceship API key or secret is not configured")

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "X-API-Key": self.api_key,
                "X-API-Secret": self.api_secret,
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=transport,
        )
        logger.info(f"Spaceship provider initialized for {self.base_url}")

    @staticmethod
    def _records_path(domain: str) -> str:
        return f"/v1/dns/records/{quote(domain, safe='')}"

    async def list_records(
        self, domain: str, take: int, skip: int, order_by: Optional[str] = None
    ) -> Tuple[List[Payload], int]:
        params: Dict[str, Any] = {"take": take, "skip": skip}
        if order_by:
            params["orderBy"] = order_by

        body = await self._request("GET", self._records_path(domain), params=params)
        body = body or {}
        items = body.get("items", [])
        return items, int(body.get("total", len(items)))

    async def put_records(self, domain: str, items: List[Payload], force: bool = True) -> None:
        await self._request(
            "PUT",
            self._records_path(domain),
            json={"force": force, "items": items},
        )
        logger.debug(f"Wrote {len(items)} records to {domain} (force={force})")

    async def delete_records(self, domain: str, items: List[Payload]) -> None:
        await self._request("DELETE", self._records_path(domain), json=items)
        logger.debug(f"Deleted {len(items)} records from {domain}")

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Issue a request and return the parsed body, or None for 204."""
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Spaceship {method} {path} failed: {e}")
            raise

        if not response.is_success:
            details = self._parse_body(response)
            logger.error(f"Spaceship {method} {path} returned {response.status_code}: {details}")
            raise DNSProviderError(
                f"Spaceship API request failed: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
                details=details,
            )

        if response.status_code == 204:
            return None
        return self._parse_body(response)

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError:
                return None
        return response.text

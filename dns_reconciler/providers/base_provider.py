"""
Base DNS provider interface.

This module defines the abstract base class that all registrar providers must
implement. Providers speak registrar payloads (plain dicts); conversion to
typed records happens in the DNS client.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

Payload = Dict[str, Any]


class DNSProviderError(RuntimeError):
    """A registrar request failed. Carries the HTTP status and response body."""

    def __init__(self, message: str, status: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status = status
        self.details = details


class DNSProvider(ABC):
    """Abstract base class for registrar DNS providers."""

    @abstractmethod
    async def list_records(
        self, domain: str, take: int, skip: int, order_by: Optional[str] = None
    ) -> Tuple[List[Payload], int]:
        """Get one page of records and the total record count."""
        pass

    @abstractmethod
    async def put_records(self, domain: str, items: List[Payload], force: bool = True) -> None:
        """Write records, overwriting same-slot records when ``force`` is set."""
        pass

    @abstractmethod
    async def delete_records(self, domain: str, items: List[Payload]) -> None:
        """Delete records given their full bodies."""
        pass

    async def aclose(self) -> None:
        """Release any underlying connections."""
        return None

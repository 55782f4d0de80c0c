"""
Registrar provider implementations.

This package contains the cache-fronted DNS client plus the Spaceship and
mock registrar providers it delegates to.
"""

from .base_provider import DNSProvider, DNSProviderError
from .dns_client import DNSClient
from .mock_provider import MockDNSProvider
from .spaceship_provider import SpaceshipProvider

__all__ = ["DNSClient", "DNSProvider", "DNSProviderError", "MockDNSProvider", "SpaceshipProvider"]

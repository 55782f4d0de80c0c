"""
DNS Reconciler - Reconcile registrar DNS records against a desired state

Normalizes heterogeneous DNS record shapes into a canonical comparable form,
reports missing and unexpected records, plans root/www hosting cutovers and
applies writes without double-applying or silently dropping records.
"""

__version__ = "1.0.0"
__author__ = "DNS Reconciler Team"
__description__ = "DNS record reconciliation for registrar-managed domains"

from .core.dns_manager import DNSManager
from .core.reconciler import RecordReconciler
from .providers.dns_client import DNSClient

__all__ = [
    "DNSManager",
    "RecordReconciler",
    "DNSClient",
]

"""
DNS Manager - Reconcile registrar DNS records against a desired state

Wires configuration, the cache-fronted DNS client, the reconciler, the
cutover planner and the conflict-aware writer together, and renders their
reports with rich.
"""

import logging
import os
import sys
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from rich.console import Console
from rich.table import Table

from ..providers.base_provider import DNSProvider
from ..providers.dns_client import DNSClient
from ..utils.cache import TtlCache
from ..utils.canonical import extract_comparable_fields, normalize_domain, summarize_by_type
from .cutover import CutoverPlanner, HostingSignatures
from .records import DnsRecord, RecordTarget
from .reconciler import DEFAULT_TYPES, RecordReconciler
from .writer import ConflictAwareWriter, WriteResult

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/config.yaml"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_default_config() -> Dict:
    """Return default configuration."""
    return {
        "dns_providers": {
            "spaceship": {
                "api_key": "",
                "api_secret": "",
                "base_url": "https://spaceship.dev/api",
            },
            "mock": {},
        },
        "default_provider": "spaceship",
        "cache": {"ttl": 120},
        "logging": {"level": "INFO"},
    }


def load_config(config_path: str) -> Dict:
    """Load configuration from YAML file, falling back to defaults."""
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Configuration loaded from {config_path}")
        return config
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using defaults")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing config file: {e}")
        raise


def apply_env_overrides(config: Dict) -> Dict:
    """Let SPACESHIP_* environment variables override file settings."""
    providers = config.setdefault("dns_providers", {})
    spaceship = providers.get("spaceship") or {}
    providers["spaceship"] = spaceship

    if os.environ.get("SPACESHIP_API_KEY"):
        spaceship["api_key"] = os.environ["SPACESHIP_API_KEY"]
    if os.environ.get("SPACESHIP_API_SECRET"):
        spaceship["api_secret"] = os.environ["SPACESHIP_API_SECRET"]
    if os.environ.get("SPACESHIP_CACHE_TTL") is not None:
        try:
            config.setdefault("cache", {})["ttl"] = int(os.environ["SPACESHIP_CACHE_TTL"])
        except ValueError:
            logger.warning(f"Ignoring non-integer SPACESHIP_CACHE_TTL: {os.environ['SPACESHIP_CACHE_TTL']}")
    return config


def config_logger(config: Dict):
    """Configure logging."""
    logging_config = config.get("logging", None)
    if logging_config:
        log_level = logging_config.get("level", "INFO")
        log_file = logging_config.get("file")

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if log_file:
            handlers.insert(0, logging.FileHandler(log_file))

        logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers)
        return

    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


class DNSManager:
    """Main DNS management class that orchestrates reconciliation and writes."""

    def __init__(
        self,
        config: Union[str, Dict, None] = DEFAULT_CONFIG_PATH,
        provider: Optional[DNSProvider] = None,
        cache: Optional[TtlCache] = None,
    ):
        """Initialize the DNS manager from a config path or dict."""
        if config is None:
            config = get_default_config()
        elif isinstance(config, str):
            config = load_config(config)
        self.config = apply_env_overrides(config)

        self.dns_client = DNSClient(self.config, provider=provider, cache=cache)
        self.reconciler = RecordReconciler()
        self.cutover_planner = CutoverPlanner(HostingSignatures.from_config(self.config.get("hosting_signatures")))
        self.writer = ConflictAwareWriter(self.dns_client)

    async def list_records(self, domain: str, order_by: Optional[str] = None) -> Dict[str, Any]:
        domain = normalize_domain(domain)
        records = await self.dns_client.fetch_all_records(domain, order_by)
        return {
            "domain": domain,
            "count": len(records),
            "byType": summarize_by_type(records),
            "items": [extract_comparable_fields(r) for r in records],
        }

    async def check_alignment(
        self,
        domain: str,
        expected: List[DnsRecord],
        include_ttl_in_match: bool = False,
        include_unexpected_of_types: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        """Compare expected records with the registrar's records for ``domain``."""
        domain = normalize_domain(domain)
        types = list(include_unexpected_of_types) if include_unexpected_of_types else sorted(DEFAULT_TYPES)
        actual = await self.dns_client.fetch_all_records(domain)
        logger.info(f"Checking {len(expected)} expected records against {len(actual)} on {domain}")

        result = self.reconciler.diff(expected, actual, include_ttl_in_match, types)
        return self.reconciler.build_report(domain, expected, result, include_ttl_in_match, types)

    async def plan_cutover(
        self,
        domain: str,
        desired_a: Optional[str] = None,
        desired_aaaa: Optional[str] = None,
        desired_cname: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Plan a root/www cutover. Never writes to the registrar."""
        domain = normalize_domain(domain)
        actual = await self.dns_client.fetch_all_records(domain)
        plan = self.cutover_planner.plan(actual, desired_a, desired_aaaa, desired_cname)
        report = {"domain": domain}
        report.update(plan.to_dict())
        return report

    async def save_records(self, domain: str, records: List[DnsRecord]) -> WriteResult:
        return await self.writer.save(normalize_domain(domain), records)

    async def delete_records(self, domain: str, targets: List[RecordTarget]) -> List[DnsRecord]:
        return await self.writer.delete(normalize_domain(domain), targets)

    async def aclose(self) -> None:
        await self.dns_client.aclose()

    def display_records(self, listing: Dict[str, Any]):
        table = Table(title=f"DNS Records - {listing['domain']}")
        table.add_column("Type", style="cyan")
        table.add_column("Name", style="magenta")
        table.add_column("Value", style="white")
        table.add_column("TTL", style="green")

        for item in listing["items"]:
            table.add_row(item["type"], item["name"], _describe(item), str(item.get("ttl") or ""))

        console.print(table)
        console.print(f"\n[bold]Total records: {listing['count']}[/bold]  {listing['byType']}")

    def display_alignment_report(self, report: Dict[str, Any]):
        """Display a summary of an alignment check."""
        table = Table(title=f"DNS Alignment - {report['domain']}")
        table.add_column("Status", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Name", style="white")
        table.add_column("Value", style="white")
        table.add_column("TTL", style="green")

        for item in report["missing"]:
            table.add_row("[red]missing[/red]", item["type"], item["name"], _describe(item), str(item.get("ttl") or ""))
        for item in report["unexpected"]:
            table.add_row(
                "[yellow]unexpected[/yellow]", item["type"], item["name"], _describe(item), str(item.get("ttl") or "")
            )

        console.print(table)
        console.print(
            f"\n[bold]Expected: {report['expectedCount']}  Missing: {report['missingCount']}  "
            f"Unexpected ({','.join(report['typesConsidered'])} only): {report['unexpectedCount']}[/bold]"
        )
        if report["missingCount"] == 0 and report["unexpectedCount"] == 0:
            console.print("[green]DNS records are aligned[/green]")

    def display_cutover_plan(self, plan: Dict[str, Any]):
        """Display a cutover plan."""
        table = Table(title=f"Cutover Plan - {plan['domain']}")
        table.add_column("Operation", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column("Name", style="white")
        table.add_column("Value", style="white")

        for item in plan["upserts"]:
            table.add_row("[green]upsert[/green]", item["type"], item["name"], _describe(item))
        for item in plan["deletes"]:
            table.add_row("[red]delete[/red]", item["type"], item["name"], _describe(item))

        console.print(table)
        if plan["likelyThirdPartyManaged"]:
            console.print("[yellow]Current root/www records look managed by a third-party host[/yellow]")
        if plan["otherRecordsByType"]:
            console.print(f"Untouched records: {plan['otherRecordsByType']}")
        if not plan["upserts"] and not plan["deletes"]:
            console.print("[green]No changes required - root/www already point at the targets[/green]")


def _describe(item: Dict[str, Any]) -> str:
    """One-line value for a comparable-fields dict."""
    skip = ("type", "name", "ttl")
    return " ".join(str(value) for key, value in item.items() if key not in skip and value is not None)

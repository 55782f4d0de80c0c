#!/usr/bin/env python3
"""
DNS Reconciler - Command Line Interface

Main entry point for the DNS Reconciler CLI.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ..core.dns_manager import DNSManager, config_logger, load_config
from ..parsers.csv import CSVParser, parse_targets
from ..utils.validators import validate_domain

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="DNS Reconciler - Compare and reconcile registrar DNS records"
    )

    parser.add_argument(
        "--config",
        "-c",
        default="configs/config.yaml",
        help="Configuration file path (default: configs/config.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List all DNS records for a domain")
    list_cmd.add_argument("domain")
    list_cmd.add_argument("--order-by", choices=["type", "-type", "name", "-name"])

    check = commands.add_parser("check", help="Compare expected records with the registrar")
    check.add_argument("domain")
    check.add_argument("--expected", "-f", required=True, help="CSV file of expected records")
    check.add_argument("--include-ttl", action="store_true", help="Treat TTL differences as mismatches")
    check.add_argument(
        "--types",
        default="A,AAAA,CNAME,MX,TXT,SRV",
        help="Comma-separated record types to report as unexpected",
    )

    cutover = commands.add_parser("cutover", help="Plan a root/www hosting cutover (read-only)")
    cutover.add_argument("domain")
    cutover.add_argument("--a", dest="desired_a", help="Desired root A address")
    cutover.add_argument("--aaaa", dest="desired_aaaa", help="Desired root AAAA address")
    cutover.add_argument("--cname", dest="desired_cname", help="Desired www CNAME target")

    save = commands.add_parser("save", help="Create or overwrite records from a CSV file")
    save.add_argument("domain")
    save.add_argument("--records", "-f", required=True, help="CSV file of records to write")

    delete = commands.add_parser("delete", help="Delete records by name and type")
    delete.add_argument("domain")
    delete.add_argument(
        "--target", "-t", action="append", required=True, help="Record to delete as name:type"
    )

    return parser


async def run(args: argparse.Namespace, dns_manager: DNSManager) -> bool:
    """Execute one sub-command; returns True on success."""
    try:
        if args.command == "list":
            dns_manager.display_records(await dns_manager.list_records(args.domain, args.order_by))
            return True

        if args.command == "check":
            expected = CSVParser(args.expected).parse_expected()
            types = [t.strip().upper() for t in args.types.split(",") if t.strip()]
            report = await dns_manager.check_alignment(args.domain, expected, args.include_ttl, types)
            dns_manager.display_alignment_report(report)
            return report["missingCount"] == 0 and report["unexpectedCount"] == 0

        if args.command == "cutover":
            plan = await dns_manager.plan_cutover(
                args.domain, args.desired_a, args.desired_aaaa, args.desired_cname
            )
            dns_manager.display_cutover_plan(plan)
            return True

        if args.command == "save":
            records = CSVParser(args.records).parse_records()
            result = await dns_manager.save_records(args.domain, records)
            print(
                f"Saved {len(result.written)} record(s) to {args.domain}"
                f" ({len(result.deleted)} conflicting record(s) replaced)"
            )
            return True

        if args.command == "delete":
            deleted = await dns_manager.delete_records(args.domain, parse_targets(args.target))
            print(f"Deleted {len(deleted)} record(s) from {args.domain}")
            return True

        return False
    finally:
        await dns_manager.aclose()


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if not validate_domain(args.domain):
        print(f"Error: '{args.domain}' is not a valid domain name")
        sys.exit(1)

    for option in ("expected", "records"):
        path = getattr(args, option, None)
        if path and not Path(path).exists():
            print(f"Error: CSV file '{path}' not found")
            sys.exit(1)

    config = load_config(args.config)
    if args.verbose:
        config["logging"] = dict(config.get("logging") or {}, level="DEBUG")
    config_logger(config)

    try:
        dns_manager = DNSManager(config)
        success = asyncio.run(run(args, dns_manager))
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}")
        print(f"Error: {e}")
        details = getattr(e, "details", None)
        if details:
            print(f"Details: {details}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
DNS Reconciler - Demo Script

This script walks through an alignment check and a Vercel-to-Fly cutover
using the mock registrar, so no real DNS records are touched.
"""

import asyncio
import csv
import os

from rich.console import Console
from rich.panel import Panel

from dns_reconciler.core.dns_manager import DNSManager
from dns_reconciler.core.records import RecordTarget, record_from_dict
from dns_reconciler.parsers.csv import CSVParser

# Initialize rich console
console = Console()

ZONE = "example.com"
FLY_ADDRESS = "66.241.124.10"
FLY_CNAME = "example.fly.dev"


def create_demo_config():
    """Build a mock-registrar configuration seeded with a Vercel-hosted zone."""
    return {
        "dns_providers": {
            "mock": {
                "records": {
                    ZONE: [
                        {"type": "A", "name": "@", "address": "76.76.21.21", "ttl": 300},
                        {"type": "CNAME", "name": "www", "cname": "cname.vercel-dns.com", "ttl": 300},
                        {"type": "MX", "name": "@", "preference": 10, "exchange": "mail.example.com", "ttl": 3600},
                        {"type": "TXT", "name": "@", "value": "v=spf1 include:_spf.example.com -all"},
                    ]
                }
            }
        },
        "default_provider": "mock",
        "cache": {"ttl": 120},
        "logging": {"level": "WARNING"},
    }


def create_demo_csv():
    """Create a demo CSV file with the records we expect to find."""
    csv_file = "demo_expected.csv"

    records = [
        ["Name", "Type", "Value", "TTL", "Exchange", "Preference"],
        ["@", "A", "76.76.21.21", "", "", ""],
        ["www", "CNAME", "cname.vercel-dns.com.", "", "", ""],
        ["@", "MX", "", "", "mail.example.com", "10"],
        ["@", "TXT", "v=spf1 -all", "", "", ""],
    ]

    with open(csv_file, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(records)

    return csv_file


def display_demo_header():
    """Display the demo header."""
    console.print(
        Panel.fit(
            "[bold blue]DNS Reconciler - Demo[/bold blue]\n"
            f"[cyan]Alignment check and hosting cutover for {ZONE}[/cyan]",
            border_style="blue",
        )
    )
    console.print()


async def apply_cutover(dns_manager, plan):
    """Apply a cutover plan: write the upserts, then delete what they do not replace."""
    upserts = [record_from_dict(item) for item in plan["upserts"]]
    replaced = {(item["name"], item["type"]) for item in plan["upserts"]}
    leftovers = {
        RecordTarget(name=item["name"], type=item["type"])
        for item in plan["deletes"]
        if (item["name"], item["type"]) not in replaced
    }

    if upserts:
        await dns_manager.save_records(ZONE, upserts)
    if leftovers:
        await dns_manager.delete_records(ZONE, sorted(leftovers, key=lambda t: (t.name, t.type)))


async def run_demo(dns_manager, csv_file):
    console.print("[bold]Current DNS Zone State:[/bold]")
    dns_manager.display_records(await dns_manager.list_records(ZONE))
    console.print()

    console.print("[bold]Alignment Check:[/bold]")
    expected = CSVParser(csv_file).parse_expected()
    dns_manager.display_alignment_report(await dns_manager.check_alignment(ZONE, expected))
    console.print()

    console.print("[bold]Cutover Plan:[/bold]")
    plan = await dns_manager.plan_cutover(ZONE, FLY_ADDRESS, None, FLY_CNAME)
    dns_manager.display_cutover_plan(plan)
    console.print()

    console.print("[bold]Would you like to apply the cutover plan?[/bold]")
    console.print("[yellow]This will update records in the mock registrar[/yellow]")
    response = input("Proceed? (yes/no): ").lower().strip()

    if response in ["yes", "y"]:
        await apply_cutover(dns_manager, plan)
        console.print("[bold]Final DNS Zone State:[/bold]")
        dns_manager.display_records(await dns_manager.list_records(ZONE))
    else:
        console.print("[yellow]Cutover skipped[/yellow]")


def main():
    """Main demo function."""
    display_demo_header()
    csv_file = create_demo_csv()

    try:
        dns_manager = DNSManager(create_demo_config())
        asyncio.run(run_demo(dns_manager, csv_file))

        console.print(
            Panel.fit(
                "[bold green]Demo Summary[/bold green]\n"
                "✓ Records listed\n"
                "✓ Expected records compared\n"
                "✓ Cutover planned\n"
                "✓ Mock provider used (no real DNS changes)",
                border_style="green",
            )
        )

    except Exception as e:
        console.print(f"[red]Demo failed with error: {e}[/red]")

    finally:
        if os.path.exists(csv_file):
            os.remove(csv_file)
        console.print()
        console.print("[bold blue]Demo completed![/bold blue]")


if __name__ == "__main__":
    main()

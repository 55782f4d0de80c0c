#!/usr/bin/env python3
"""
Test suite for DNS Reconciler

Covers validators, the CSV parser, the DNS manager and the CLI, all against
the in-memory mock registrar.
"""

import csv
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import yaml

from dns_reconciler.cli.main import build_parser, main
from dns_reconciler.core.dns_manager import DNSManager, apply_env_overrides, get_default_config, load_config
from dns_reconciler.core.records import ARecord, CNAMERecord, MXRecord, RecordTarget, SRVRecord, TXTRecord
from dns_reconciler.parsers.csv import CSVParser, parse_targets
from dns_reconciler.providers.mock_provider import MockDNSProvider
from dns_reconciler.utils.validators import (
    RecordValidationError,
    expected_to_record,
    validate_domain,
    validate_fqdn,
    validate_ipv4,
    validate_ipv6,
    validate_ttl,
)

SEEDED_RECORDS = [
    {"type": "A", "name": "@", "address": "76.76.21.21", "ttl": 300},
    {"type": "CNAME", "name": "www", "cname": "cname.vercel-dns.com", "ttl": 300},
    {"type": "MX", "name": "@", "preference": 10, "exchange": "mail.example.com", "ttl": 3600},
    {"type": "NS", "name": "@", "nameserver": "launch1.spaceship.net"},
]


def mock_config():
    return {
        "dns_providers": {"mock": {"records": {"example.com": [dict(r) for r in SEEDED_RECORDS]}}},
        "default_provider": "mock",
        "cache": {"ttl": 120},
        "logging": {"level": "INFO"},
    }


class TestValidators(unittest.TestCase):
    """Test the validation functions."""

    def test_validate_fqdn_valid(self):
        """Test valid FQDN validation."""
        valid_fqdns = [
            "example.com",
            "sub.example.com",
            "example.com.",
            "123.example.com",
            "a.b.c.d.e.f.g.h.i.j.k.l.m.n.o.p.q.r.s.t.u.v.w.x.y.z.com",
        ]

        for fqdn in valid_fqdns:
            with self.subTest(fqdn=fqdn):
                self.assertTrue(validate_fqdn(fqdn))

    def test_validate_fqdn_invalid(self):
        """Test invalid FQDN validation."""
        invalid_fqdns = [
            "",  # Empty
            "single",  # Single label
            ".example.com",  # Starts with dot
            "example..com",  # Consecutive dots
            "example-.com",  # Ends with hyphen
            "-example.com",  # Starts with hyphen
            "a" * 64 + ".com",  # Label too long
        ]

        for fqdn in invalid_fqdns:
            with self.subTest(fqdn=fqdn):
                self.assertFalse(validate_fqdn(fqdn))

    def test_validate_domain(self):
        self.assertTrue(validate_domain("example.com"))
        self.assertTrue(validate_domain("a.io"))
        self.assertFalse(validate_domain("a.b"))  # Too short
        self.assertFalse(validate_domain("1.2.3.4"))
        self.assertFalse(validate_domain("localhost"))

    def test_validate_ip_addresses(self):
        self.assertTrue(validate_ipv4("192.168.1.1"))
        self.assertFalse(validate_ipv4("256.1.2.3"))
        self.assertFalse(validate_ipv4("1.2.3"))
        self.assertTrue(validate_ipv6("2001:db8::1"))
        self.assertFalse(validate_ipv6("1.2.3.4"))

    def test_validate_ttl(self):
        for ttl in (60, 300, 86400):
            with self.subTest(ttl=ttl):
                self.assertTrue(validate_ttl(ttl))
        for ttl in (59, 86401, "300", None, True):
            with self.subTest(ttl=ttl):
                self.assertFalse(validate_ttl(ttl))

    def test_expected_to_record_valid(self):
        cases = [
            ({"type": "a", "name": "@", "address": "1.2.3.4", "ttl": "300"}, ARecord(name="@", ttl=300, address="1.2.3.4")),
            ({"type": "CNAME", "name": "www", "cname": "example.com"}, CNAMERecord(name="www", cname="example.com")),
            (
                {"type": "MX", "name": "@", "preference": "10", "exchange": "mail.example.com"},
                MXRecord(name="@", preference=10, exchange="mail.example.com"),
            ),
            ({"type": "TXT", "name": "@", "value": "v=spf1 -all"}, TXTRecord(name="@", value="v=spf1 -all")),
            (
                {
                    "type": "SRV",
                    "name": "_sip._tcp",
                    "service": "_sip",
                    "protocol": "_tcp",
                    "priority": 10,
                    "weight": 60,
                    "port": 5060,
                    "target": "sip.example.com",
                },
                SRVRecord(
                    name="_sip._tcp",
                    service="_sip",
                    protocol="_tcp",
                    priority=10,
                    weight=60,
                    port=5060,
                    target="sip.example.com",
                ),
            ),
        ]
        for raw, expected in cases:
            with self.subTest(type=raw["type"]):
                self.assertEqual(expected_to_record(raw), expected)

    def test_expected_to_record_invalid(self):
        invalid = [
            {"type": "CAA", "name": "@", "value": "x"},  # Not an expected type
            {"type": "A", "name": "", "address": "1.2.3.4"},  # Empty name
            {"type": "A", "name": "@", "address": "not-an-ip"},
            {"type": "AAAA", "name": "@", "address": "1.2.3.4"},
            {"type": "A", "name": "@", "address": "1.2.3.4", "ttl": 30},  # TTL too low
            {"type": "MX", "name": "@", "exchange": "mail.example.com"},  # No preference
            {"type": "MX", "name": "@", "preference": 70000, "exchange": "mail.example.com"},
            {"type": "SRV", "name": "_sip._tcp", "service": "_sip", "protocol": "_tcp", "priority": 1, "weight": 1, "port": 0, "target": "x"},
            {"type": "TXT", "name": "@"},
        ]
        for raw in invalid:
            with self.subTest(raw=raw):
                with self.assertRaises(RecordValidationError):
                    expected_to_record(raw)


class TestCSVParser(unittest.TestCase):
    """Test CSV parsing of record files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_csv(self, filename, rows):
        path = os.path.join(self.temp_dir, filename)
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerows(rows)
        return path

    def test_parse_expected_with_value_shorthand(self):
        path = self.write_csv(
            "expected.csv",
            [
                ["Name", "Type", "Value", "TTL", "Exchange", "Preference"],
                ["@", "A", "76.76.21.21", "300", "", ""],
                ["www", "cname", "cname.vercel-dns.com", "", "", ""],
                ["@", "MX", "", "3600", "mail.example.com", "10"],
            ],
        )
        records = CSVParser(path).parse_expected()
        self.assertEqual(
            records,
            [
                ARecord(name="@", ttl=300, address="76.76.21.21"),
                CNAMERecord(name="www", cname="cname.vercel-dns.com"),
                MXRecord(name="@", ttl=3600, preference=10, exchange="mail.example.com"),
            ],
        )

    def test_parse_expected_reports_row(self):
        path = self.write_csv("bad.csv", [["Name", "Type", "Value"], ["@", "A", "1.2.3.4"], ["@", "A", "nope"]])
        with self.assertRaises(RecordValidationError) as ctx:
            CSVParser(path).parse_expected()
        self.assertTrue(str(ctx.exception).startswith("Row 3: "))

    def test_parse_records_keeps_free_text_value(self):
        path = self.write_csv("records.csv", [["name", "type", "value"], ["@", "MX", "10 mail.example.com"]])
        records = CSVParser(path).parse_records()
        self.assertEqual(records, [MXRecord(name="@", value="10 mail.example.com")])

    def test_missing_columns(self):
        path = self.write_csv("invalid.csv", [["Name", "Value"], ["@", "1.2.3.4"]])
        with self.assertRaises(ValueError):
            CSVParser(path).parse()

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            CSVParser(os.path.join(self.temp_dir, "missing.csv")).parse()

    def test_parse_targets(self):
        self.assertEqual(
            parse_targets(["@:a", "_sip._tcp:SRV"]),
            [RecordTarget(name="@", type="A"), RecordTarget(name="_sip._tcp", type="SRV")],
        )
        with self.assertRaises(ValueError):
            parse_targets(["www"])


class TestConfig(unittest.TestCase):
    """Test configuration loading and environment overrides."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_load_config_from_file(self):
        path = os.path.join(self.temp_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.dump(mock_config(), f)
        self.assertEqual(load_config(path)["default_provider"], "mock")

    def test_missing_config_uses_defaults(self):
        config = load_config(os.path.join(self.temp_dir, "missing.yaml"))
        self.assertEqual(config, get_default_config())

    def test_invalid_yaml_raises(self):
        path = os.path.join(self.temp_dir, "broken.yaml")
        with open(path, "w") as f:
            f.write("dns_providers: [unclosed\n")
        with self.assertRaises(yaml.YAMLError):
            load_config(path)

    def test_env_overrides(self):
        env = {"SPACESHIP_API_KEY": "k", "SPACESHIP_API_SECRET": "s", "SPACESHIP_CACHE_TTL": "0"}
        with patch.dict(os.environ, env):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config["dns_providers"]["spaceship"]["api_key"], "k")
        self.assertEqual(config["dns_providers"]["spaceship"]["api_secret"], "s")
        self.assertEqual(config["cache"]["ttl"], 0)

    def test_non_integer_cache_ttl_is_ignored(self):
        with patch.dict(os.environ, {"SPACESHIP_CACHE_TTL": "soon"}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config["cache"]["ttl"], 120)


class TestDNSManager(unittest.IsolatedAsyncioTestCase):
    """Test the main DNS manager."""

    def setUp(self):
        self.dns_manager = DNSManager(mock_config())
        self.provider = self.dns_manager.dns_client.provider

    async def asyncTearDown(self):
        await self.dns_manager.aclose()

    def test_dns_manager_initialization(self):
        """Test DNS manager initialization."""
        self.assertIsInstance(self.provider, MockDNSProvider)
        self.assertIsNotNone(self.dns_manager.reconciler)
        self.assertIsNotNone(self.dns_manager.writer)

    async def test_list_records(self):
        listing = await self.dns_manager.list_records("Example.COM.")
        self.assertEqual(listing["domain"], "example.com")
        self.assertEqual(listing["count"], 4)
        self.assertEqual(listing["byType"], {"A": 1, "CNAME": 1, "MX": 1, "NS": 1})

    async def test_check_alignment_aligned(self):
        expected = [
            ARecord(name="@", address="76.76.21.21"),
            CNAMERecord(name="www", cname="CNAME.vercel-dns.com."),
            MXRecord(name="@", preference=10, exchange="mail.example.com"),
        ]
        report = await self.dns_manager.check_alignment("example.com", expected)
        self.assertEqual(report["missingCount"], 0)
        # NS is outside the default types
        self.assertEqual(report["unexpectedCount"], 0)

    async def test_check_alignment_with_ttl(self):
        expected = [ARecord(name="@", address="76.76.21.21", ttl=600)]
        report = await self.dns_manager.check_alignment("example.com", expected, True, ["A"])
        self.assertEqual(report["missingCount"], 1)
        self.assertEqual(report["unexpectedCount"], 1)
        self.assertTrue(report["includeTtlInMatch"])
        self.assertEqual(report["typesConsidered"], ["A"])

    async def test_plan_cutover_is_read_only(self):
        plan = await self.dns_manager.plan_cutover("example.com", "1.2.3.4", None, "example.fly.dev")

        self.assertEqual(plan["domain"], "example.com")
        self.assertTrue(plan["likelyThirdPartyManaged"])
        self.assertEqual(len(plan["upserts"]), 2)
        self.assertEqual(len(plan["deletes"]), 2)
        self.assertEqual(plan["otherRecordsByType"], {"MX": 1, "NS": 1})
        self.assertEqual(self.provider.mutation_calls(), [])

    async def test_save_then_check(self):
        await self.dns_manager.save_records("example.com", [ARecord(name="@", address="1.2.3.4", ttl=3600)])
        report = await self.dns_manager.check_alignment(
            "example.com", [ARecord(name="@", address="1.2.3.4")], False, ["A"]
        )
        self.assertEqual(report["missingCount"], 0)
        self.assertEqual(report["unexpectedCount"], 0)

    async def test_delete_records(self):
        deleted = await self.dns_manager.delete_records("example.com", [RecordTarget(name="www", type="CNAME")])
        self.assertEqual(len(deleted), 1)
        listing = await self.dns_manager.list_records("example.com")
        self.assertNotIn("CNAME", listing["byType"])


class TestCLI(unittest.TestCase):
    """Test the command line interface end to end with the mock provider."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, "config.yaml")
        with open(self.config_file, "w") as f:
            yaml.dump(mock_config(), f)

        self.expected_csv = os.path.join(self.temp_dir, "expected.csv")
        with open(self.expected_csv, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["Name", "Type", "Value", "Exchange", "Preference"])
            writer.writerow(["@", "A", "76.76.21.21", "", ""])
            writer.writerow(["www", "CNAME", "cname.vercel-dns.com", "", ""])
            writer.writerow(["@", "MX", "", "mail.example.com", "10"])

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def run_cli(self, *argv):
        with self.assertRaises(SystemExit) as ctx:
            main(["--config", self.config_file, *argv])
        return ctx.exception.code

    def test_parser_requires_command(self):
        with self.assertRaises(SystemExit):
            build_parser().parse_args([])

    def test_list(self):
        self.assertEqual(self.run_cli("list", "example.com"), 0)

    def test_check_aligned(self):
        self.assertEqual(self.run_cli("check", "example.com", "--expected", self.expected_csv), 0)

    def test_check_misaligned(self):
        self.assertEqual(
            self.run_cli("check", "example.com", "--expected", self.expected_csv, "--types", "A,NS"), 1
        )

    def test_cutover(self):
        self.assertEqual(self.run_cli("cutover", "example.com", "--a", "1.2.3.4"), 0)

    def test_delete(self):
        self.assertEqual(self.run_cli("delete", "example.com", "--target", "www:CNAME"), 0)

    def test_invalid_domain(self):
        self.assertEqual(self.run_cli("list", "not_a_domain"), 1)

    def test_missing_csv(self):
        missing = os.path.join(self.temp_dir, "missing.csv")
        self.assertEqual(self.run_cli("check", "example.com", "--expected", missing), 1)

    def test_bad_delete_target(self):
        self.assertEqual(self.run_cli("delete", "example.com", "--target", "www"), 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)

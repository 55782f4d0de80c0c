#!/usr/bin/env python3
"""
Tests for the TTL cache.
"""

import unittest

from dns_reconciler.utils.cache import TtlCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestTtlCache(unittest.TestCase):
    """Test expiry, overwrite and invalidation."""

    def setUp(self):
        self.clock = FakeClock()
        self.cache = TtlCache(default_ttl=60, clock=self.clock)

    def test_get_missing_key(self):
        self.assertIsNone(self.cache.get("nope"))
        self.assertEqual(self.cache.get("nope", "fallback"), "fallback")

    def test_set_and_get(self):
        self.cache.set("key", {"value": 1})
        self.assertEqual(self.cache.get("key"), {"value": 1})

    def test_entry_alive_until_ttl_elapses(self):
        self.cache.set("key", "v", ttl=10)
        self.clock.advance(10)
        self.assertEqual(self.cache.get("key"), "v")

    def test_entry_expires_after_ttl(self):
        self.cache.set("key", "v", ttl=10)
        self.clock.advance(10.001)
        self.assertIsNone(self.cache.get("key"))
        # Expired entries are removed on read
        self.assertEqual(self.cache.size, 0)

    def test_default_ttl_applies(self):
        self.cache.set("key", "v")
        self.clock.advance(59)
        self.assertEqual(self.cache.get("key"), "v")
        self.clock.advance(2)
        self.assertIsNone(self.cache.get("key"))

    def test_overwrite_refreshes_expiry(self):
        self.cache.set("key", "old", ttl=10)
        self.clock.advance(8)
        self.cache.set("key", "new", ttl=10)
        self.clock.advance(8)
        self.assertEqual(self.cache.get("key"), "new")

    def test_zero_ttl_expires_once_clock_moves(self):
        self.cache.set("key", "v", ttl=0)
        self.assertEqual(self.cache.get("key"), "v")
        self.clock.advance(0.001)
        self.assertIsNone(self.cache.get("key"))

    def test_invalidate_by_substring(self):
        self.cache.set("dns:example.com:", 1)
        self.cache.set("dns:example.com:name", 2)
        self.cache.set("dns:other.com:", 3)

        self.assertEqual(self.cache.invalidate("dns:example.com:"), 2)
        self.assertIsNone(self.cache.get("dns:example.com:"))
        self.assertIsNone(self.cache.get("dns:example.com:name"))
        self.assertEqual(self.cache.get("dns:other.com:"), 3)

    def test_invalidate_scoped_to_domain(self):
        self.cache.set("dns:example.com.au:", 1)
        self.assertEqual(self.cache.invalidate("dns:example.com:"), 0)
        self.assertEqual(self.cache.get("dns:example.com.au:"), 1)

    def test_invalidate_leaves_other_namespaces(self):
        self.cache.set("dns:ex.com:A", 1)
        self.cache.set("domain:ex.com", 2)
        self.cache.invalidate("dns:ex.com")
        self.assertIsNone(self.cache.get("dns:ex.com:A"))
        self.assertEqual(self.cache.get("domain:ex.com"), 2)

    def test_invalidate_nothing(self):
        self.assertEqual(self.cache.invalidate("dns:"), 0)

    def test_clear(self):
        self.cache.set("a", 1)
        self.cache.set("b", 2)
        self.assertEqual(len(self.cache), 2)
        self.cache.clear()
        self.assertEqual(len(self.cache), 0)
        self.assertNotIn("a", self.cache)

    def test_falsy_values_are_cached(self):
        self.cache.set("empty", [])
        self.assertEqual(self.cache.get("empty", "fallback"), [])


if __name__ == "__main__":
    unittest.main(verbosity=2)

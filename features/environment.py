"""
Behave environment configuration for DNS Reconciler scenarios.

Every scenario runs against a fresh in-memory mock registrar, so no network
access or registrar credentials are needed.
"""

import asyncio
import logging
from pathlib import Path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def before_all(context):
    """Set up test environment before all tests."""
    context.base_dir = Path(__file__).parent.parent
    context.test_domain = "example.com"
    context.loop = asyncio.new_event_loop()
    context.run = context.loop.run_until_complete
    logger.info("Test environment setup complete")


def before_scenario(context, scenario):
    """Start each scenario with an empty registrar zone."""
    context.scenario_name = scenario.name
    context.test_config = {
        "dns_providers": {"mock": {"records": {context.test_domain: []}}},
        "default_provider": "mock",
        "cache": {"ttl": 120},
        "logging": {"level": "DEBUG"},
    }
    context.expected_records = []
    context.records_to_save = []
    logger.info(f"Starting scenario: {scenario.name}")


def after_scenario(context, scenario):
    """Release the DNS manager after each scenario."""
    if getattr(context, "dns_manager", None) is not None:
        context.run(context.dns_manager.aclose())
        context.dns_manager = None
    logger.info(f"Completed scenario: {scenario.name}")


def after_all(context):
    """Clean up test environment after all tests."""
    context.loop.close()
    logger.info("Test environment cleanup complete")

#!/usr/bin/env python3
"""
DNS Reconciler - Main Entry Point

This is the main entry point for the DNS Reconciler.
It can be run directly or imported as a module.
"""

from dns_reconciler.cli.main import main

if __name__ == "__main__":
    main()

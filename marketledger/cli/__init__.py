"""Marketledger CLI — Typer-based command-line interface.

Provides the ``marketledger`` command with subcommands for running the demo
and querying a persisted ledger.

All output uses Rich for formatted terminal display.
"""

"""Productivity Archive test suite.

Unit tests for the archive, restore, metrics and reconciliation services and
for the HTTP API, all running against in-memory SQLite.
"""

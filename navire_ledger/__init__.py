"""Contribution ledger: payments, expenses and a funding summary served over HTTP."""

__version__ = "0.1.0"
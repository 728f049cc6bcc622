"""
Wallet Ledger - Personal Finance Ledger Service

A FastAPI-based microservice that records categorized transactions,
keeps account balances consistent under concurrent edits, and serves
statements and spending statistics.
"""

__version__ = "0.1.0"

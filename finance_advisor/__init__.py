"""
Personal Finance Advisor - Source Package

A single-user personal finance tracker: record income and expenses,
plan monthly budgets per category, and get simple rule-based advice.

DESIGN PRINCIPLES:
1. Summaries and advice are pure functions of a snapshot
2. Every mutation is an intent handed to the storage layer
3. Errors are surfaced to the user, never crash the session
4. Storage and identity are swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Finance Advisor Team"

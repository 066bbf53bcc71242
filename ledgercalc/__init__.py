"""
LedgerCalc - Multi-currency Transaction Calculation Engine

Keeps transaction header totals consistent with detail lines across
document, local and country currency; applies GST per line; allocates
payments against outstanding balances; gates journals on debit = credit.
"""

__version__ = "1.0.0"

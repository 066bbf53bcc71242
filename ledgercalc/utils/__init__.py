"""
LedgerCalc - Utilities Package
"""

"""
LedgerCalc - Services Package

Business logic services for the calculation engine.
"""

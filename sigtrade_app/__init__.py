"""
SigTrade App - Signal-Driven Binary Options Trading Core

Parses short textual trading signals, gates them against live risk limits,
and drives the trade lifecycle from placement to settlement with balance
and P&L accounting.
"""

__version__ = "0.1.0"
__author__ = "SigTrade Team"

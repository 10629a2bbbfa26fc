"""
Trade ledger module.

Owns the authoritative trade set and account state, and drives the
PENDING -> WON / LOST lifecycle. All mutations go through place() and
settle().
"""

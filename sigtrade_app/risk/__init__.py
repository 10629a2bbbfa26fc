"""
Risk gating module.

Decides whether a proposed trade may be placed given the current risk
limits and account state. Advisory only: the ledger re-runs the gate at
placement time under its own lock.
"""

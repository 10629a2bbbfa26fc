"""
Utility functions module.

Time semantics:
- All ledger timestamps are timezone-aware UTC
- The trading day is the UTC calendar date of a timestamp

Money semantics:
- Amounts, payouts and balances are Decimal; floats are converted through
  their string form so 0.1 stays 0.1
"""

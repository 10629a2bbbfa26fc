"""
Signal parsing module.

Turns raw signal text lines (``EURUSD CALL 60s $10``) into structured,
validated Signal values. Malformed input yields an invalid Signal carrying
a rejection reason; parsing never raises.
"""

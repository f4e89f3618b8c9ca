"""
utils/ - Shared helpers
=======================
Logging, date arithmetic, argument parsing and currency formatting.
"""

"""
security/ - Access control
==========================
Whitelist and rate-limit decorators applied to every handler.
"""

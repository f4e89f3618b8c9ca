"""
models/ - Domain Layer
======================
Plain dataclasses for accounts, their schedules, transactions, users and the
calendar events derived from accounts. No database or Telegram imports here.
"""

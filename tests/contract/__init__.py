"""Contract tests.

Purpose
- Pin down the DatabaseContext behaviour callers rely on, independent of the
  database behind it.

Guidelines
- Parametrize over every context fixture (SQLite file, Postgres container).
- Resolve futures with a timeout so a stuck worker fails the test instead of hanging it.
"""

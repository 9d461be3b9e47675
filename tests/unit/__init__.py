"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No servers or network; in-memory SQLite and tmp_path files are allowed.
- Prefer behavior-centric assertions over implementation details.
- Keep tests small, fast, and deterministic.
"""

"""Packaged Alembic environment shared by every platform's migrations."""

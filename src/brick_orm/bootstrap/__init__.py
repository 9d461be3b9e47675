"""Bootstrap (composition root) for brick-orm.

Assembles a ready-to-use `DatabaseContext`: reads configuration, picks the
backend implementation and hands it the caller's entity registry.

Import rules:
- Callers and entry points import *this* package rather than adapters.
- This package may import `brick_orm.adapters`, `brick_orm.interfaces` and
  `brick_orm.config`; those must not import `brick_orm.bootstrap`.
"""

from .bootstrap import BACKENDS, bootstrap, build_database_context

__all__ = ["BACKENDS", "bootstrap", "build_database_context"]

"""Adapters (infrastructure) for brick-orm.

Concrete implementations of the interfaces in `brick_orm.interfaces` on top of
SQLAlchemy and Alembic: engines, column types, fetch plans, the unit of work,
the database context and the migration runner.

Dependency rule: may import `brick_orm.interfaces` and `brick_orm.data`;
neither of those imports this package.
"""

"""brick-orm

A thin asynchronous persistence facade over SQLAlchemy. Every call runs in
its own unit of work on a worker pool and hands back a future; schema
migrations are replayed per database platform before the facade is usable.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

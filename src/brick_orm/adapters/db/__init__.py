"""SQLAlchemy plumbing: engines, dialects, column types and fetch plans."""

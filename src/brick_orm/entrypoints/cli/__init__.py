"""The ``brick-orm`` command line."""

"""Entrypoints (inbound adapters) for brick-orm.

Expose the library to the outside world through the ``brick-orm`` command
line. Parse and validate inputs, call adapters and present results.
"""

"""Global pytest fixtures for brick-orm."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from brick_orm.interfaces.database_context import DatabaseContext


pytest_plugins = [
    "tests.fixtures.entities",
    "tests.fixtures.sqlite",
    "tests.fixtures.postgres",
]


# Helper to route to an existing context fixture by name
@pytest.fixture
def context(request: pytest.FixtureRequest) -> DatabaseContext:
    """Indirection fixture to parametrize over context-providing fixtures.

    Example:
        ```py
        @pytest.mark.parametrize("context", ["sqlite_context", "postgres_context"], indirect=True)
        def test_something(context): ...
        ```
    """
    return request.getfixturevalue(request.param)

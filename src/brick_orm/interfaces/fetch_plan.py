"""Explicit fetch plans for eager relationship loading.

A `FetchPlan` names the relationships that must be loaded together with an
entity. Entities leave their unit of work detached, so anything not in the
plan is unavailable to the caller afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

FETCH_PLAN_ATTRIBUTE = "__fetch_plan__"


@dataclass(frozen=True)
class FetchPlan:
    """Relationship paths to load eagerly.

    Paths are relationship attribute names; nested relationships are written
    as dotted paths (``"owner.addresses"``).
    """

    paths: tuple[str, ...] = ()

    @classmethod
    def of(cls, *paths: str) -> FetchPlan:
        """Build a plan from relationship paths, dropping duplicates."""
        return cls(tuple(dict.fromkeys(paths)))

    @classmethod
    def coerce(cls, value: FetchPlan | Iterable[str] | str | None) -> FetchPlan | None:
        """Normalize a user-supplied fetch argument.

        Args:
            value: A plan, a single path, an iterable of paths or ``None``.

        Returns:
            FetchPlan | None: The equivalent plan, or ``None`` when no plan was given.
        """
        if value is None or isinstance(value, FetchPlan):
            return value
        if isinstance(value, str):
            return cls.of(value)
        return cls.of(*value)

    @classmethod
    def declared_by(cls, entity_type: type) -> FetchPlan:
        """Return the default plan declared on an entity class.

        Entities declare it as a class attribute, e.g.
        ``__fetch_plan__ = ("pets",)``. Classes without one get an empty plan.
        """
        return cls.coerce(getattr(entity_type, FETCH_PLAN_ATTRIBUTE, None)) or cls()

    def __bool__(self) -> bool:
        return bool(self.paths)

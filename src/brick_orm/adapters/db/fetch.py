"""Translate fetch plans into SQLAlchemy loader options."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect
from sqlalchemy.orm import selectinload

from brick_orm.interfaces.errors import InvalidFetchPlan
from brick_orm.interfaces.fetch_plan import FetchPlan

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm.interfaces import LoaderOption


def resolve_plan(
    entity_type: type, fetch: FetchPlan | Iterable[str] | str | None
) -> FetchPlan:
    """Pick the per-call plan when given, else the one the entity declares."""
    plan = FetchPlan.coerce(fetch)
    if plan is None:
        return FetchPlan.declared_by(entity_type)
    return plan


def loader_options(entity_type: type, plan: FetchPlan) -> list[LoaderOption]:
    """Build ``selectinload`` chains for every path in ``plan``.

    Raises:
        InvalidFetchPlan: If a path segment is not a relationship.
    """
    options: list[LoaderOption] = []
    for path in plan.paths:
        current = entity_type
        option = None
        for name in path.split("."):
            relationship = inspect(current).relationships.get(name)
            if relationship is None:
                raise InvalidFetchPlan(entity_type, path)
            attr = getattr(current, name)
            option = selectinload(attr) if option is None else option.selectinload(attr)
            current = relationship.mapper.class_
        if option is not None:
            options.append(option)
    return options


def load_planned(entity: object, plan: FetchPlan) -> None:
    """Touch every planned relationship so it is loaded before detaching.

    Used after `Session.refresh`, which only reloads column attributes and
    expires relationships.
    """
    for path in plan.paths:
        _touch(entity, path.split("."))


def _touch(obj: object, names: list[str]) -> None:
    if obj is None or not names:
        return
    value = getattr(obj, names[0])
    rest = names[1:]
    if isinstance(value, (list, set, tuple)):
        for item in value:
            _touch(item, rest)
    else:
        _touch(value, rest)

"""Mapped entities and migration scripts shared by the test-suite.

The tables created by ``dbmigrations/<platform>/`` match these models, so a
context built with `MIGRATIONS_ROOT` can persist them straight away.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import ForeignKey, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from brick_orm.adapters.db.sa_types import CodecType, SerializableValueType
from brick_orm.data.serializable import JSON, SerializableValue

MIGRATIONS_ROOT = Path(__file__).parent / "dbmigrations"
REVISIONS = ["0001_person", "0002_pet", "0003_setting"]


class Base(DeclarativeBase):
    """Declarative base for test entities."""

    metadata = MetaData()


class Person(Base):
    """A person owning pets; no default fetch plan."""

    __tablename__ = "person"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(100))
    age: Mapped[int | None] = mapped_column(nullable=True)
    pets: Mapped[list[Pet]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"Person(id={self.id!r}, name={self.name!r}, age={self.age!r})"


class Pet(Base):
    """A pet; always loaded together with its owner."""

    __tablename__ = "pet"
    __fetch_plan__ = ("owner",)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(100))
    owner_id: Mapped[int] = mapped_column(ForeignKey("person.id"))
    owner: Mapped[Person] = relationship(back_populates="pets")


class Setting(Base):
    """Key/value row exercising the codec column types."""

    __tablename__ = "setting"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[SerializableValue] = mapped_column(
        SerializableValueType(255), nullable=True
    )
    payload: Mapped[dict[str, Any] | None] = mapped_column(
        CodecType(JSON), nullable=True
    )


ENTITIES = (Person, Pet, Setting)


class NotMapped:
    """Plain class used to check the entity registry."""


@pytest.fixture
def migrations_root() -> Path:
    """Root directory holding the test migrations, one folder per platform."""
    return MIGRATIONS_ROOT


@pytest.fixture
def entities() -> tuple[type, ...]:
    return ENTITIES

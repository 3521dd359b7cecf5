"""Inheritance chain resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .definition import ClassDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelSnapshot:
    """Member tables of one chain level, frozen at instantiation time."""

    name: Optional[str]
    public_fields: dict[str, Any] = field(default_factory=dict)
    public_methods: dict[str, Callable[..., Any]] = field(default_factory=dict)
    private_fields: dict[str, Any] = field(default_factory=dict)
    private_methods: dict[str, Callable[..., Any]] = field(default_factory=dict)
    active: dict[str, Callable[..., Any]] = field(default_factory=dict)

    @classmethod
    def of(cls, definition: ClassDefinition) -> "LevelSnapshot":
        return cls(
            definition.name,
            dict(definition.public_fields),
            dict(definition.public_methods),
            dict(definition.private_fields),
            dict(definition.private_methods),
            dict(definition.active),
        )

    @property
    def has_private(self) -> bool:
        return bool(self.private_fields or self.private_methods)


def resolve_chain(definition: ClassDefinition) -> list[ClassDefinition]:
    """Return the inheritance chain of ``definition``, root ancestor first.

    Every superclass reference is evaluated afresh, so redefining a parent
    between two instantiations changes what the second one inherits. A
    cyclic chain never terminates; references must reach a root.
    """

    chain = [definition]
    current = definition
    while current.inherit is not None:
        current = current.inherit.resolve()
        chain.insert(0, current)
    logger.debug(
        "resolved chain %s", " -> ".join(d.name or "<anonymous>" for d in chain)
    )
    return chain


def snapshot_chain(chain: list[ClassDefinition]) -> tuple[LevelSnapshot, ...]:
    return tuple(LevelSnapshot.of(definition) for definition in chain)


__all__ = ["LevelSnapshot", "resolve_chain", "snapshot_chain"]

"""Shallow and deep cloning of instances."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Mapping, Optional

from ..constants import COPY_METHOD_NAME, DEEP_COPY_HOOK
from .builder import assemble, finalize
from .core import Instance, Scope, copy_value

logger = logging.getLogger(__name__)


def _current_values(scope: Scope, installed: Mapping[str, Any]):
    """Bindings of ``scope`` that are not untouched builder-installed methods."""

    for name, value in scope._scope_bindings.items():
        if installed.get(name) is not value:
            yield name, value


def _has_own_copy(instance: Instance) -> bool:
    origin = instance._scope_origin
    return any(COPY_METHOD_NAME in level.public_methods for level in origin.plan.levels)


def _deep_copy_value(value: Any, memo: dict[int, Any]) -> Any:
    if isinstance(value, Instance) and value._scope_origin is not None:
        if id(value) in memo:
            return memo[id(value)]
        if _has_own_copy(value):
            return value.copy(deep=True)
        return copy_instance(value, deep=True, memo=memo)
    return copy.deepcopy(value, memo)


def _apply_replacements(
    scope: Optional[Scope], replacements: Any, memo: dict[int, Any]
) -> None:
    if scope is None or not replacements:
        return
    bindings = scope._scope_bindings
    if isinstance(replacements, Mapping):
        items: Iterable[tuple[str, Any]] = replacements.items()
    else:
        items = [(name, _deep_copy_value(bindings[name], memo)) for name in replacements]
    for name, value in items:
        bindings[name] = value


def copy_instance(
    instance: Instance, deep: bool = False, memo: Optional[dict[int, Any]] = None
) -> Instance:
    """Return a new instance holding copies of ``instance``'s fields.

    Methods are rebound against the clone's own scopes from the level
    snapshots taken when the source was built, so later ``set`` calls on
    the definition do not leak into clones. A method slot that was
    reassigned on the source carries its current value over instead.
    Builtin containers are copied at every nesting level; every other
    value is shared.

    With ``deep=True`` a private ``deep_copy`` method, when present, is
    called on the clone and returns ``{"public": ..., "private": ...}``.
    Each tier maps names to replacement values, or lists names whose
    values are replaced by their own deep copy. Without the hook every
    field holding an instance is replaced by a deep copy of it. ``memo``
    maps ids of already copied instances to their clones, so instances
    that refer to each other are copied once.
    """

    origin = getattr(instance, "_scope_origin", None)
    if origin is None:
        raise TypeError(f"{instance!r} was not built from a class definition")
    if memo is None:
        memo = {}

    clone, clone_origin = assemble(origin.plan, fill_fields=False)
    if deep:
        memo[id(instance)] = clone

    tiers = [(instance, clone, origin.public_methods)]
    if origin.private is not None:
        tiers.append((origin.private, clone_origin.private, origin.private_methods))
    for source, target, installed in tiers:
        bindings = target._scope_bindings
        for name in installed:
            if name not in source._scope_bindings:
                bindings.pop(name, None)
        for name, value in _current_values(source, installed):
            bindings[name] = copy_value(value)

    if deep:
        private = clone_origin.private
        hook = None
        if private is not None:
            hook = private._scope_bindings.get(DEEP_COPY_HOOK)
        if callable(hook):
            replacements = hook() or {}
            _apply_replacements(clone, replacements.get("public"), memo)
            _apply_replacements(private, replacements.get("private"), memo)
        else:
            for scope, installed in (
                (clone, clone_origin.public_methods),
                (private, clone_origin.private_methods),
            ):
                if scope is None:
                    continue
                nested = [
                    name
                    for name, value in _current_values(scope, installed)
                    if isinstance(value, Instance)
                ]
                _apply_replacements(scope, nested, memo)

    finalize(clone_origin, clone)
    logger.debug("copied %s (deep=%s)", origin.plan.name, deep)
    return clone


__all__ = ["copy_instance"]

"""Core runtime data structures for refclass."""

from __future__ import annotations

import builtins
import copy
import functools
import types
from typing import Any, Callable, Iterable, Mapping, Optional

from ..constants import COPIED_CONTAINER_TYPES, RESERVED_PREFIX
from ..errors import LockedMemberAddition, ReadOnlyScopeError


class _Missing:
    """Default for active accessors: distinguishes a read from a write of None."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class Scope:
    """Named-binding context with reference semantics.

    Members live in an internal dict and are read and written as
    attributes. Names registered as active bindings are intercepted: a
    read calls the function with no argument, a write calls it with the
    assigned value.
    """

    __slots__ = (
        "_scope_name",
        "_scope_bindings",
        "_scope_active",
        "_scope_locked",
        "_scope_readonly",
    )

    def __init__(
        self,
        name: str,
        bindings: Optional[Mapping[str, Any]] = None,
        *,
        readonly: bool = False,
    ) -> None:
        object.__setattr__(self, "_scope_name", name)
        object.__setattr__(self, "_scope_bindings", dict(bindings or {}))
        object.__setattr__(self, "_scope_active", {})
        object.__setattr__(self, "_scope_locked", False)
        object.__setattr__(self, "_scope_readonly", readonly)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails; internal slots that are not
        # populated yet must not recurse into the member tables.
        if name.startswith(RESERVED_PREFIX) or name.startswith("__"):
            raise AttributeError(name)
        active = self._scope_active
        if name in active:
            return active[name]()
        try:
            return self._scope_bindings[name]
        except KeyError:
            raise AttributeError(
                f"{self._scope_name} has no member {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith(RESERVED_PREFIX):
            raise AttributeError(f"{name!r} is an internal scope attribute")
        if self._scope_readonly:
            raise ReadOnlyScopeError(f"{self._scope_name} is read-only")
        active = self._scope_active
        if name in active:
            active[name](value)
            return
        if self._scope_locked and name not in self._scope_bindings:
            raise LockedMemberAddition(
                f"cannot add member {name!r} to locked scope {self._scope_name}"
            )
        self._scope_bindings[name] = value

    def __delattr__(self, name: str) -> None:
        if self._scope_readonly:
            raise ReadOnlyScopeError(f"{self._scope_name} is read-only")
        if self._scope_locked:
            raise AttributeError(
                f"cannot remove member {name!r} from locked scope {self._scope_name}"
            )
        try:
            del self._scope_bindings[name]
        except KeyError:
            raise AttributeError(
                f"{self._scope_name} has no member {name!r}"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._scope_bindings or name in self._scope_active

    def __dir__(self) -> list[str]:
        return sorted(set(self._scope_bindings) | set(self._scope_active))

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<Scope {self._scope_name} members={len(self._scope_bindings)}>"


class Instance(Scope):
    """Public scope handed to callers as "the instance"."""

    __slots__ = ("_scope_tags", "_scope_origin")

    def __init__(self, name: str, *, tags: Iterable[str] = (), origin=None) -> None:
        super().__init__(name)
        object.__setattr__(self, "_scope_tags", tuple(tags))
        object.__setattr__(self, "_scope_origin", origin)

    def __copy__(self) -> "Instance":
        from .cloner import copy_instance

        return copy_instance(self)

    def __deepcopy__(self, memo) -> "Instance":
        from .cloner import copy_instance

        return copy_instance(self, deep=True, memo=memo)

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        tag = self._scope_tags[0] if self._scope_tags else self._scope_name
        return f"<{tag} instance>"


def lock_scope(scope: Optional[Scope]) -> None:
    """Reject the addition of new top-level names to ``scope``."""

    if scope is not None:
        object.__setattr__(scope, "_scope_locked", True)


def install_active(scope: Scope, name: str, fn: Callable[..., Any]) -> None:
    """Register ``fn`` as an intercepted accessor for ``name``."""

    scope._scope_bindings.pop(name, None)
    scope._scope_active[name] = fn


class MethodEnv(dict):
    """Globals mapping handed to rebound methods.

    Holds the names injected for one inheritance level (``self``,
    ``private``, ``super``). Any other global lookup falls through to the
    scopes in ``lookup`` and then to the module the method was written in;
    names missing everywhere continue on to builtins.
    """

    def __init__(
        self,
        module_globals: Mapping[str, Any],
        injected: Mapping[str, Any],
        lookup: Iterable[Optional[Scope]] = (),
    ) -> None:
        super().__init__(injected)
        self.setdefault("__builtins__", module_globals.get("__builtins__", builtins))
        self.module_globals = module_globals
        self.lookup = tuple(scope for scope in lookup if scope is not None)

    def __missing__(self, name: str) -> Any:
        for scope in self.lookup:
            if name in scope:
                return getattr(scope, name)
        return self.module_globals[name]


def rebind_function(fn: types.FunctionType, env: MethodEnv) -> types.FunctionType:
    """Return a copy of ``fn`` whose global names resolve through ``env``."""

    bound = types.FunctionType(
        fn.__code__, env, fn.__name__, fn.__defaults__, fn.__closure__
    )
    bound.__kwdefaults__ = copy.copy(fn.__kwdefaults__)
    return functools.update_wrapper(bound, fn)


class Factory:
    """Field default produced afresh for every instance."""

    def __init__(self, factory: Callable[[], Any]) -> None:
        if not callable(factory):
            raise TypeError("Factory expects a zero-argument callable")
        self.factory = factory

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"Factory({self.factory!r})"


def fresh_value(default: Any) -> Any:
    """Materialise a field default for a new instance."""

    if isinstance(default, Factory):
        return default.factory()
    return copy_value(default)


def copy_value(value: Any, memo: Optional[dict[int, Any]] = None) -> Any:
    """Copy builtin containers recursively; share every other value.

    Lists, dicts, sets, tuples and bytearrays are rebuilt at every nesting
    level, so no container reachable from a field is shared. Anything else
    found inside them, instances included, keeps its identity.
    """

    kind = type(value)
    if kind not in COPIED_CONTAINER_TYPES:
        return value
    if memo is None:
        memo = {}
    key = id(value)
    if key in memo:
        return memo[key]

    if kind is list:
        result: Any = []
        memo[key] = result
        result.extend(copy_value(item, memo) for item in value)
    elif kind is dict:
        result = {}
        memo[key] = result
        for name, item in value.items():
            result[name] = copy_value(item, memo)
    elif kind is tuple:
        items = tuple(copy_value(item, memo) for item in value)
        if all(new is old for new, old in zip(items, value)):
            items = value
        result = memo[key] = items
    else:
        # set elements are hashable, a bytearray holds plain ints
        result = memo[key] = kind(value)
    return result


__all__ = [
    "Factory",
    "MISSING",
    "Instance",
    "MethodEnv",
    "Scope",
    "copy_value",
    "fresh_value",
    "install_active",
    "lock_scope",
    "rebind_function",
]

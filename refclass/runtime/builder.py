"""Instance construction: scope graph assembly and method rebinding."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

from ..constants import (
    COPY_METHOD_NAME,
    GENERIC_TAG,
    INITIALIZER_NAME,
    REBIND_NAME,
    UNQUALIFIED,
)
from ..errors import ConstructorArgumentMismatch
from .chain import LevelSnapshot, resolve_chain, snapshot_chain
from .core import (
    Instance,
    MethodEnv,
    Scope,
    fresh_value,
    install_active,
    lock_scope,
    rebind_function,
)
from .definition import ClassDefinition
from .members import is_method

logger = logging.getLogger(__name__)

FIELD = "field"
METHOD = "method"
ACTIVE = "active"

_UNSET = object()


@dataclass(frozen=True)
class BuildPlan:
    """Everything needed to (re)build the scope graph of one instance."""

    name: str
    levels: tuple[LevelSnapshot, ...]
    encapsulation: str
    lock: bool
    tags: tuple[str, ...]
    debug_names: frozenset[str]

    @property
    def has_private(self) -> bool:
        return any(level.has_private for level in self.levels)


@dataclass
class InstanceOrigin:
    """Build record kept on every public scope; used by the cloner."""

    plan: BuildPlan
    private: Optional[Scope]
    method_names: frozenset[str]
    private_method_names: frozenset[str]
    public_methods: dict[str, Any] = field(default_factory=dict)
    private_methods: dict[str, Any] = field(default_factory=dict)


def make_plan(definition: ClassDefinition, chain: list[ClassDefinition]) -> BuildPlan:
    tags: tuple[str, ...] = ()
    if definition.tagged:
        tags = tuple(d.name for d in reversed(chain) if d.name) + (GENERIC_TAG,)
    return BuildPlan(
        name=definition.name or "<anonymous>",
        levels=snapshot_chain(chain),
        encapsulation=definition.encapsulation,
        lock=definition.lock,
        tags=tags,
        debug_names=frozenset(definition.debug_names),
    )


def _make_rebind(public: Scope, private: Optional[Scope]) -> Callable[[str, Any], Any]:
    def rebind(name, value):
        """Assign ``value`` to the existing public or private member ``name``."""

        if name in public:
            setattr(public, name, value)
        elif private is not None and name in private:
            setattr(private, name, value)
        else:
            raise NameError(f"no member named {name!r} to rebind")
        return value

    return rebind


class LevelBinder:
    """Rebinds the functions of one chain level against the shared scopes."""

    def __init__(
        self,
        encapsulation: str,
        public: Scope,
        private: Optional[Scope],
        super_scope: Optional[Scope],
    ) -> None:
        injected: dict[str, Any] = {"self": public}
        if private is not None:
            injected["private"] = private
        if super_scope is not None:
            injected["super"] = super_scope
        lookup: tuple[Optional[Scope], ...] = ()
        if encapsulation == UNQUALIFIED:
            injected[REBIND_NAME] = _make_rebind(public, private)
            lookup = (public, private)
        self.injected = injected
        self.lookup = lookup
        self._envs: dict[int, MethodEnv] = {}

    def bind(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        if not is_method(fn):
            return fn
        module_globals = fn.__globals__
        env = self._envs.get(id(module_globals))
        if env is None:
            env = MethodEnv(module_globals, self.injected, self.lookup)
            self._envs[id(module_globals)] = env
        return rebind_function(fn, env)

    def bind_all(self, functions: Mapping[str, Callable[..., Any]]) -> dict[str, Any]:
        return {name: self.bind(fn) for name, fn in functions.items()}


def _super_scope(
    name: str, methods: Mapping[str, Any], active: Mapping[str, Any]
) -> Scope:
    scope = Scope(f"{name}.super", methods, readonly=True)
    scope._scope_active.update(active)
    return scope


def _traced(label: str, fn: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(fn)
    def traced(*args, **kwargs):
        logger.debug("enter %s args=%r kwargs=%r", label, args, kwargs)
        result = fn(*args, **kwargs)
        logger.debug("exit %s -> %r", label, result)
        return result

    return traced


def _copy_method(public: Instance) -> Callable[..., Instance]:
    def copy(deep=False):
        """Return a clone of this instance."""

        from .cloner import copy_instance

        return copy_instance(public, deep=deep)

    return copy


def assemble(
    plan: BuildPlan, *, fill_fields: bool = True
) -> tuple[Instance, InstanceOrigin]:
    """Build the public, private and super scopes described by ``plan``.

    Levels are walked root first. Field defaults are materialised per
    instance unless ``fill_fields`` is false (the cloner copies values in
    afterwards). Each level's methods see ``super`` bound to a read-only
    scope holding the merged methods of all older levels, already bound
    to the same shared scopes. The scopes are returned unlocked.
    """

    public = Instance(plan.name, tags=plan.tags)
    private = Scope(f"{plan.name}.private") if plan.has_private else None

    public_members: dict[str, tuple[str, Any]] = {}
    private_members: dict[str, tuple[str, Any]] = {}
    inherited_methods: dict[str, Any] = {}
    inherited_active: dict[str, Any] = {}

    def field_value(default):
        return fresh_value(default) if fill_fields else _UNSET

    for depth, level in enumerate(plan.levels):
        for name, default in level.public_fields.items():
            public_members[name] = (FIELD, field_value(default))
        for name, default in level.private_fields.items():
            private_members[name] = (FIELD, field_value(default))

        super_scope = None
        if depth > 0:
            super_scope = _super_scope(plan.name, inherited_methods, inherited_active)
        binder = LevelBinder(plan.encapsulation, public, private, super_scope)

        bound_public = binder.bind_all(level.public_methods)
        bound_private = binder.bind_all(level.private_methods)
        bound_active = binder.bind_all(level.active)
        for name, fn in bound_public.items():
            public_members[name] = (METHOD, fn)
        for name, fn in bound_private.items():
            private_members[name] = (METHOD, fn)
        for name, fn in bound_active.items():
            public_members[name] = (ACTIVE, fn)

        inherited_methods.update(bound_public)
        inherited_methods.update(bound_private)
        inherited_active.update(bound_active)

    if COPY_METHOD_NAME not in public_members:
        public_members[COPY_METHOD_NAME] = (METHOD, _copy_method(public))

    installed: dict[str, Any] = {}
    installed_private: dict[str, Any] = {}
    for scope, members, methods in (
        (public, public_members, installed),
        (private, private_members, installed_private),
    ):
        if scope is None:
            continue
        for name, (kind, value) in members.items():
            if kind == ACTIVE:
                install_active(scope, name, value)
            elif value is not _UNSET:
                if kind == METHOD:
                    if name in plan.debug_names:
                        value = _traced(f"{scope._scope_name}.{name}", value)
                    methods[name] = value
                scope._scope_bindings[name] = value

    origin = InstanceOrigin(
        plan=plan,
        private=private,
        method_names=frozenset(
            name for name, (kind, _) in public_members.items() if kind != FIELD
        ),
        private_method_names=frozenset(
            name for name, (kind, _) in private_members.items() if kind != FIELD
        ),
        public_methods=installed,
        private_methods=installed_private,
    )
    object.__setattr__(public, "_scope_origin", origin)
    return public, origin


def finalize(origin: InstanceOrigin, public: Instance) -> None:
    if origin.plan.lock:
        lock_scope(public)
        lock_scope(origin.private)


def build_instance(
    definition: ClassDefinition,
    args: Iterable[Any] = (),
    kwargs: Optional[Mapping[str, Any]] = None,
) -> Instance:
    """Resolve the chain of ``definition`` and construct a new instance."""

    args = tuple(args)
    kwargs = dict(kwargs or {})
    chain = resolve_chain(definition)
    plan = make_plan(definition, chain)

    public, origin = assemble(plan)
    finalize(origin, public)

    initializer = public._scope_bindings.get(INITIALIZER_NAME)
    if INITIALIZER_NAME in origin.method_names and callable(initializer):
        initializer(*args, **kwargs)
    elif args or kwargs:
        raise ConstructorArgumentMismatch(
            f"{plan.name} has no {INITIALIZER_NAME} method to accept constructor arguments"
        )
    logger.debug("instantiated %s (%d levels)", plan.name, len(plan.levels))
    return public


__all__ = [
    "BuildPlan",
    "InstanceOrigin",
    "LevelBinder",
    "assemble",
    "build_instance",
    "finalize",
    "make_plan",
]

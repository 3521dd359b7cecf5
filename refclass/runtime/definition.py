"""Class definitions: construction, deferred superclass references, mutation."""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Mapping, Optional

from ..constants import (
    ENCAPSULATION_MODES,
    INITIALIZER_NAME,
    MEMBER_TIERS,
    QUALIFIED,
    REBIND_NAME,
    UNQUALIFIED,
)
from ..errors import (
    DuplicateMemberName,
    MisplacedInitializer,
    NonFunctionDynamicProperty,
    ReservedNameConflict,
    UnresolvableSuperclass,
)
from .members import (
    MemberSource,
    check_member_name,
    classify_members,
    is_method,
    validate_definition_members,
)

logger = logging.getLogger(__name__)


def _check_unqualified_name(name: str, encapsulation: str) -> None:
    if encapsulation == UNQUALIFIED and name == REBIND_NAME:
        raise ReservedNameConflict(
            f"{REBIND_NAME!r} is reserved for the rebinding helper of "
            "unqualified definitions"
        )


class SuperclassRef:
    """Deferred reference to a parent definition, evaluated on every use."""

    def __init__(self, thunk: Callable[[], Any], description: str) -> None:
        self.thunk = thunk
        self.description = description

    @classmethod
    def capture(
        cls, inherit: Any, namespace: Optional[Mapping[str, Any]] = None
    ) -> Optional["SuperclassRef"]:
        if inherit is None:
            return None
        if isinstance(inherit, SuperclassRef):
            return inherit
        if isinstance(inherit, ClassDefinition):
            return cls(lambda: inherit, inherit.name or "<anonymous>")
        if isinstance(inherit, str):
            if namespace is None:
                raise ValueError(
                    f"A namespace is required to resolve superclass {inherit!r}"
                )
            return cls(lambda: namespace[inherit], inherit)
        if callable(inherit):
            return cls(inherit, getattr(inherit, "__qualname__", repr(inherit)))
        raise TypeError(
            "inherit must be a ClassDefinition, a name, or a zero-argument callable"
        )

    def resolve(self) -> "ClassDefinition":
        try:
            parent = self.thunk()
        except Exception as exc:
            raise UnresolvableSuperclass(
                f"Superclass reference {self.description!r} could not be evaluated: {exc}"
            ) from exc
        if not isinstance(parent, ClassDefinition):
            raise UnresolvableSuperclass(
                f"Superclass reference {self.description!r} evaluated to "
                f"{type(parent).__name__}, not a class definition"
            )
        return parent

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"SuperclassRef({self.description})"


class ClassDefinition:
    """Reusable, mutable blueprint from which instances are built."""

    def __init__(
        self,
        name: Optional[str],
        public: MemberSource = None,
        private: MemberSource = None,
        active: MemberSource = None,
        inherit: Optional[SuperclassRef] = None,
        *,
        lock: bool = True,
        tagged: bool = True,
        encapsulation: str = QUALIFIED,
    ) -> None:
        self.name = name
        self.public_fields, self.public_methods = classify_members(public)
        self.private_fields, self.private_methods = classify_members(private)
        self.active: dict[str, Callable[..., Any]] = dict(active or ())
        self.inherit = inherit
        self.lock = lock
        self.tagged = tagged
        self.encapsulation = encapsulation
        self.debug_names: set[str] = set()

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<ClassDefinition {self.name or '<anonymous>'}>"

    def new(self, *args: Any, **kwargs: Any):
        """Build a new instance, passing the arguments to ``initialize``."""

        from .builder import build_instance

        return build_instance(self, args, kwargs)

    def get_inherit(self) -> Optional["ClassDefinition"]:
        """Resolve the superclass reference now, or ``None`` for a root."""

        if self.inherit is None:
            return None
        return self.inherit.resolve()

    def has_private(self) -> bool:
        """True when any level of the resolved chain declares private members."""

        from .chain import resolve_chain

        return any(
            level.private_fields or level.private_methods
            for level in resolve_chain(self)
        )

    def _tables(self) -> list[dict[str, Any]]:
        return [
            self.public_fields,
            self.public_methods,
            self.private_fields,
            self.private_methods,
            self.active,
        ]

    def has_member(self, name: str) -> bool:
        return any(name in table for table in self._tables())

    def member_names(self, tier: str) -> list[str]:
        """Names declared on this definition for ``tier``.

        ``tier`` is one of ``public``, ``private``, ``active``,
        ``public_fields``, ``public_methods``, ``private_fields`` or
        ``private_methods``.
        """

        tables = {
            "public": [self.public_fields, self.public_methods],
            "private": [self.private_fields, self.private_methods],
            "active": [self.active],
            "public_fields": [self.public_fields],
            "public_methods": [self.public_methods],
            "private_fields": [self.private_fields],
            "private_methods": [self.private_methods],
        }
        if tier not in tables:
            raise ValueError(f"Unknown member tier {tier!r}")
        return [name for table in tables[tier] for name in table]

    def set(self, tier: str, name: str, value: Any, overwrite: bool = False):
        """Add or replace a member; only instances built afterwards see it."""

        if tier not in MEMBER_TIERS:
            raise ValueError(
                f"tier must be one of {', '.join(MEMBER_TIERS)}; got {tier!r}"
            )
        check_member_name(name)
        _check_unqualified_name(name, self.encapsulation)
        if name == INITIALIZER_NAME and tier != "public":
            raise MisplacedInitializer(
                f"{INITIALIZER_NAME!r} is only allowed among public members"
            )
        if tier == "active" and not callable(value):
            raise NonFunctionDynamicProperty(f"Active member {name!r} must be a function")

        if self.has_member(name):
            if not overwrite:
                raise DuplicateMemberName(
                    f"{self.name or '<anonymous>'} already has a member named {name!r}; "
                    "use overwrite=True to replace it"
                )
            for table in self._tables():
                table.pop(name, None)

        if tier == "active":
            self.active[name] = value
        elif tier == "public":
            target = self.public_methods if is_method(value) else self.public_fields
            target[name] = value
        else:
            target = self.private_methods if is_method(value) else self.private_fields
            target[name] = value
        logger.debug("set %s member %r on %s", tier, name, self.name)
        return self

    def debug(self, name: str) -> None:
        """Trace calls of method ``name`` on instances created from now on."""

        self.debug_names.add(name)

    def undebug(self, name: str) -> None:
        self.debug_names.discard(name)

    def describe(self) -> dict[str, Any]:
        """Plain-data view of the definition for display layers."""

        return {
            "name": self.name,
            "public_fields": list(self.public_fields),
            "public_methods": list(self.public_methods),
            "private_fields": list(self.private_fields),
            "private_methods": list(self.private_methods),
            "active": list(self.active),
            "inherit": self.inherit.description if self.inherit else None,
            "lock": self.lock,
            "tagged": self.tagged,
            "encapsulation": self.encapsulation,
            "debug_names": sorted(self.debug_names),
        }


def define_class(
    name: Optional[str] = None,
    public: MemberSource = None,
    private: MemberSource = None,
    active: MemberSource = None,
    inherit: Any = None,
    *,
    lock: bool = True,
    tagged: bool = True,
    encapsulation: str = QUALIFIED,
    namespace: Optional[Mapping[str, Any]] = None,
) -> ClassDefinition:
    """Create a class definition.

    ``public`` and ``private`` hold fields (any non-function value) and
    methods (plain functions). Methods reach the instance through the free
    names ``self``, ``private`` and ``super``, which are bound for every
    instance. ``active`` holds one-argument accessors.

    ``inherit`` is stored unevaluated and re-resolved on every
    instantiation. It may be a definition, a zero-argument callable
    (``lambda: Parent``), or a name looked up in ``namespace``, which
    defaults to the caller's module globals.
    """

    if encapsulation not in ENCAPSULATION_MODES:
        raise ValueError(
            f"encapsulation must be one of {', '.join(ENCAPSULATION_MODES)}; "
            f"got {encapsulation!r}"
        )
    public, private, active = validate_definition_members(public, private, active)
    for member, _ in [*public, *private, *active]:
        _check_unqualified_name(member, encapsulation)

    if isinstance(inherit, str) and namespace is None:
        namespace = sys._getframe(1).f_globals
    superclass = SuperclassRef.capture(inherit, namespace)

    definition = ClassDefinition(
        name,
        public,
        private,
        active,
        superclass,
        lock=lock,
        tagged=tagged,
        encapsulation=encapsulation,
    )
    logger.debug(
        "defined class %s (%d public, %d private, %d active members)",
        name,
        len(public),
        len(private),
        len(active),
    )
    return definition


def is_class_definition(obj: Any) -> bool:
    return isinstance(obj, ClassDefinition)


__all__ = [
    "ClassDefinition",
    "SuperclassRef",
    "define_class",
    "is_class_definition",
]

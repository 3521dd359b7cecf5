"""Reflection primitives used by display and debugging layers."""

from __future__ import annotations

from typing import Any, Optional

from .core import Instance, Scope
from .definition import ClassDefinition


class MetaObject:
    """A plain-data reflection of a refclass runtime object."""

    def __init__(self, kind, data):
        self.kind = kind
        self.data = data

    def __repr__(self):  # pragma: no cover - debugging helper
        if self.kind == "ClassDefinition":
            return f"<MetaClassDefinition {self.data.name}>"
        if self.kind == "Instance":
            return f"<MetaInstance {', '.join(class_tags(self.data))}>"
        if self.kind == "Scope":
            return f"<MetaScope {self.data._scope_name}>"
        return f"<MetaObject {self.kind}>"

    def to_dict(self):
        """Return a JSON-friendly view; values of fields are not formatted."""
        if self.kind == "ClassDefinition":
            return self.data.describe()
        if self.kind == "Instance":
            return inspect_instance(self.data)
        if self.kind == "Scope":
            return scope_contents(self.data)
        return {"kind": self.kind}


def reflect(obj):
    """Produce a MetaObject view of any refclass structure."""

    if isinstance(obj, ClassDefinition):
        return MetaObject("ClassDefinition", obj)
    if isinstance(obj, Instance):
        return MetaObject("Instance", obj)
    if isinstance(obj, Scope):
        return MetaObject("Scope", obj)
    return MetaObject("Value", obj)


def scope_contents(scope: Scope, method_names: Optional[frozenset[str]] = None):
    """Split a scope's bindings into fields, methods and active names."""

    bindings = scope._scope_bindings
    if method_names is None:
        method_names = frozenset(name for name, value in bindings.items() if callable(value))
    return {
        "name": scope._scope_name,
        "fields": {
            name: value for name, value in bindings.items() if name not in method_names
        },
        "methods": [name for name in bindings if name in method_names],
        "active": list(scope._scope_active),
        "locked": scope._scope_locked,
    }


def inspect_instance(instance: Instance) -> dict[str, Any]:
    """Expose the public and private scope contents of ``instance``."""

    origin = instance._scope_origin
    if origin is None:
        raise RuntimeError("inspect_instance requires an instance built by refclass")
    private = origin.private
    return {
        "tags": list(instance._scope_tags),
        "encapsulation": origin.plan.encapsulation,
        "levels": [level.name for level in origin.plan.levels],
        "public": scope_contents(instance, origin.method_names),
        "private": (
            scope_contents(private, origin.private_method_names)
            if private is not None
            else None
        ),
    }


def is_instance(obj: Any) -> bool:
    return isinstance(obj, Instance) and obj._scope_origin is not None


def class_tags(obj: Any) -> list[str]:
    """Runtime type tags: most-derived class name first, generic marker last."""

    if not isinstance(obj, Instance):
        return []
    return list(obj._scope_tags)


def inherits(obj: Any, name: str) -> bool:
    return name in class_tags(obj)


def list_meta_ops():
    return {
        "reflect": "Return a MetaObject view of a definition, instance or scope",
        "inspect_instance": "Public and private scope contents of an instance",
        "class_tags": "Runtime type tags of an instance",
        "inherits": "Whether an instance carries a given class tag",
        "list_meta_ops": "List available reflective primitives",
    }


__all__ = [
    "MetaObject",
    "class_tags",
    "inherits",
    "inspect_instance",
    "is_instance",
    "list_meta_ops",
    "reflect",
    "scope_contents",
]

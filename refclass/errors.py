"""Error taxonomy raised by the refclass runtime."""

from __future__ import annotations


class RefClassError(Exception):
    """Base class for every error raised by the object model."""


class InvalidMemberName(RefClassError, ValueError):
    """A member collection contained an unnamed or unusable name."""


class DuplicateMemberName(RefClassError, ValueError):
    """A name was reused across public, private and active members."""


class ReservedNameConflict(RefClassError, ValueError):
    """A member tried to use ``self``, ``private`` or ``super``."""


class MisplacedInitializer(RefClassError, ValueError):
    """``initialize`` was declared outside the public members."""


class NonFunctionDynamicProperty(RefClassError, TypeError):
    """An active member was not callable."""


class UnresolvableSuperclass(RefClassError, RuntimeError):
    """The deferred superclass reference did not yield a class definition."""


class LockedMemberAddition(RefClassError, AttributeError):
    """A new member was added to a locked scope."""


class ReadOnlyScopeError(RefClassError, AttributeError):
    """A ``super`` scope was written to."""


class ConstructorArgumentMismatch(RefClassError, TypeError):
    """Arguments were passed to ``new`` but no ``initialize`` accepts them."""


__all__ = [
    "ConstructorArgumentMismatch",
    "DuplicateMemberName",
    "InvalidMemberName",
    "LockedMemberAddition",
    "MisplacedInitializer",
    "NonFunctionDynamicProperty",
    "ReadOnlyScopeError",
    "RefClassError",
    "ReservedNameConflict",
    "UnresolvableSuperclass",
]

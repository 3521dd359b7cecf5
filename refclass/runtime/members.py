"""Member classification and validation for class definitions."""

from __future__ import annotations

import keyword
import types
from typing import Any, Iterable, Mapping, Optional, Union

from ..constants import INITIALIZER_NAME, RESERVED_NAMES, RESERVED_PREFIX
from ..errors import (
    DuplicateMemberName,
    InvalidMemberName,
    MisplacedInitializer,
    NonFunctionDynamicProperty,
    ReservedNameConflict,
)

MemberSource = Optional[Union[Mapping[str, Any], Iterable[tuple[str, Any]]]]


def is_method(value: Any) -> bool:
    """Methods are plain Python functions, the only values that can be rebound."""

    return isinstance(value, types.FunctionType)


def is_valid_member_name(name: Any) -> bool:
    return (
        isinstance(name, str)
        and name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("__")
    )


def normalize_members(members: MemberSource) -> list[tuple[Any, Any]]:
    """Return ``members`` as an ordered list of ``(name, value)`` pairs."""

    if members is None:
        return []
    if isinstance(members, Mapping):
        return list(members.items())
    pairs = []
    for entry in members:
        if not isinstance(entry, tuple) or len(entry) != 2:
            raise InvalidMemberName(f"Member entry {entry!r} is not a (name, value) pair")
        pairs.append(entry)
    return pairs


def classify_members(members: MemberSource) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split ``members`` into ``(fields, methods)``, preserving order."""

    fields: dict[str, Any] = {}
    methods: dict[str, Any] = {}
    for name, value in normalize_members(members):
        if is_method(value):
            methods[name] = value
        else:
            fields[name] = value
    return fields, methods


def check_member_name(name: Any) -> None:
    """Validate a single name against the naming and reserved-name rules."""

    if not is_valid_member_name(name):
        raise InvalidMemberName(f"{name!r} is not a valid member name")
    if name in RESERVED_NAMES or name.startswith(RESERVED_PREFIX):
        raise ReservedNameConflict(
            f"Members cannot use the reserved name {name!r}; "
            f"reserved: {', '.join(RESERVED_NAMES)}"
        )


def validate_definition_members(
    public: MemberSource,
    private: MemberSource = None,
    active: MemberSource = None,
) -> tuple[list[tuple[str, Any]], list[tuple[str, Any]], list[tuple[str, Any]]]:
    """Run every construction-time check and return the normalised groups.

    The checks run in a fixed order so the first violated rule decides the
    error raised: unnamed entries, duplicates across all three groups,
    reserved names, a misplaced ``initialize``, and non-callable active
    members.
    """

    groups = [normalize_members(g) for g in (public, private, active)]
    names = [name for group in groups for name, _ in group]

    for name in names:
        if not is_valid_member_name(name):
            raise InvalidMemberName(
                f"All members of public, private and active must be named; got {name!r}"
            )

    seen: set[str] = set()
    duplicates = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        raise DuplicateMemberName(
            f"Members of public, private and active must have unique names: {duplicates}"
        )

    for name in names:
        check_member_name(name)

    public_pairs, private_pairs, active_pairs = groups
    if any(name == INITIALIZER_NAME for name, _ in private_pairs + active_pairs):
        raise MisplacedInitializer(
            f"{INITIALIZER_NAME!r} is only allowed among public members"
        )

    bad_active = [name for name, value in active_pairs if not callable(value)]
    if bad_active:
        raise NonFunctionDynamicProperty(
            f"All active members must be functions: {bad_active}"
        )

    return public_pairs, private_pairs, active_pairs


__all__ = [
    "check_member_name",
    "classify_members",
    "is_method",
    "is_valid_member_name",
    "normalize_members",
    "validate_definition_members",
]

"""Shared constant values for the refclass runtime."""

QUALIFIED = "qualified"
UNQUALIFIED = "unqualified"
ENCAPSULATION_MODES = (QUALIFIED, UNQUALIFIED)

RESERVED_NAMES = ("self", "private", "super")
RESERVED_PREFIX = "_scope_"

INITIALIZER_NAME = "initialize"
COPY_METHOD_NAME = "copy"
DEEP_COPY_HOOK = "deep_copy"
REBIND_NAME = "rebind"

MEMBER_TIERS = ("public", "private", "active")

GENERIC_TAG = "RefObject"

COPIED_CONTAINER_TYPES = (list, dict, set, tuple, bytearray)

SCOPE_COLORS = {
    "public": "#8BC34A",
    "private": "#FF7043",
    "level": "#90CAF9",
    "definition": "#B0BEC5",
}

__all__ = [
    "COPIED_CONTAINER_TYPES",
    "COPY_METHOD_NAME",
    "DEEP_COPY_HOOK",
    "ENCAPSULATION_MODES",
    "GENERIC_TAG",
    "INITIALIZER_NAME",
    "MEMBER_TIERS",
    "QUALIFIED",
    "REBIND_NAME",
    "RESERVED_NAMES",
    "RESERVED_PREFIX",
    "SCOPE_COLORS",
    "UNQUALIFIED",
]

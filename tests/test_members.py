"""Tests for member classification and definition-time validation."""

import pytest

from refclass import (
    MISSING,
    DuplicateMemberName,
    InvalidMemberName,
    MisplacedInitializer,
    NonFunctionDynamicProperty,
    RefClassError,
    ReservedNameConflict,
    classify_members,
    validate_definition_members,
)


def test_classify_members_splits_functions_from_values_in_order():
    def method():
        return 1

    fields, methods = classify_members({"a": 1, "m": method, "b": [1], "c": len})

    assert list(fields) == ["a", "b", "c"]
    assert methods == {"m": method}


def test_classify_members_accepts_none_and_pairs():
    assert classify_members(None) == ({}, {})

    fields, methods = classify_members([("x", 1), ("y", lambda: 2)])

    assert list(fields) == ["x"]
    assert list(methods) == ["y"]


def test_classify_members_rejects_malformed_pairs():
    with pytest.raises(InvalidMemberName):
        classify_members([("x", 1, 2)])


@pytest.mark.parametrize("name", ["", None, 3, "1abc", "with space", "class", "__dunder"])
def test_unnamed_or_unusable_names_are_rejected(name):
    with pytest.raises(InvalidMemberName):
        validate_definition_members({name: 1})


def test_names_must_be_unique_across_groups():
    with pytest.raises(DuplicateMemberName, match="x"):
        validate_definition_members({"x": 1}, {"x": 2})

    with pytest.raises(DuplicateMemberName):
        validate_definition_members({"x": 1}, None, {"x": lambda value=MISSING: None})

    with pytest.raises(DuplicateMemberName):
        validate_definition_members([("y", 1), ("y", 2)])


@pytest.mark.parametrize("name", ["self", "private", "super", "_scope_bindings"])
def test_reserved_names_are_rejected(name):
    with pytest.raises(ReservedNameConflict):
        validate_definition_members({}, {name: 1})


def test_initialize_is_public_only():
    init = lambda: None  # noqa: E731

    with pytest.raises(MisplacedInitializer):
        validate_definition_members({}, {"initialize": init})

    with pytest.raises(MisplacedInitializer):
        validate_definition_members({}, None, {"initialize": init})

    public, private, active = validate_definition_members({"initialize": init})
    assert public == [("initialize", init)]
    assert private == [] and active == []


def test_active_members_must_be_callable():
    with pytest.raises(NonFunctionDynamicProperty, match="x2"):
        validate_definition_members({}, None, {"x2": 5})


def test_checks_run_in_order():
    # An unnamed entry wins over a duplicate appearing earlier.
    with pytest.raises(InvalidMemberName):
        validate_definition_members([("x", 1), ("x", 2), ("", 3)])

    # A duplicate wins over a reserved name.
    with pytest.raises(DuplicateMemberName):
        validate_definition_members({"self": 1}, {"self": 2})


def test_errors_share_the_refclass_base_and_builtin_categories():
    with pytest.raises(RefClassError):
        validate_definition_members({"super": 1})

    with pytest.raises(ValueError):
        validate_definition_members({"x": 1}, {"x": 1})

    with pytest.raises(TypeError):
        validate_definition_members({}, None, {"a": "not callable"})

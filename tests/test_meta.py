"""Tests for the reflective helpers in ``refclass.runtime.meta``."""

from __future__ import annotations

import pytest

from refclass import (
    GENERIC_TAG,
    MetaObject,
    Scope,
    define_class,
    inherits,
    inspect_instance,
    is_instance,
    list_meta_ops,
    reflect,
    scope_contents,
)


def test_reflect_identifies_runtime_types(queue_class):
    q = queue_class.new()

    assert reflect(queue_class).kind == "ClassDefinition"
    assert reflect(q).kind == "Instance"
    assert reflect(Scope("plain")).kind == "Scope"
    assert reflect(123).kind == "Value"


def test_meta_object_to_dict(queue_class):
    assert reflect(queue_class).to_dict() == queue_class.describe()
    assert reflect(queue_class.new()).to_dict()["tags"] == ["Queue", GENERIC_TAG]
    assert MetaObject("Custom", object()).to_dict() == {"kind": "Custom"}


def test_inspect_instance_exposes_both_scopes(counting_queue_class):
    cq = counting_queue_class.new("a")

    view = inspect_instance(cq)

    assert view["levels"] == ["Queue", "CountingQueue"]
    assert view["encapsulation"] == "qualified"
    assert set(view["public"]["methods"]) == {
        "initialize",
        "add",
        "remove",
        "get_total",
        "copy",
    }
    assert view["public"]["fields"] == {}
    assert view["public"]["locked"] is True
    assert view["private"]["fields"] == {"queue": ["a"], "total": 1}
    assert view["private"]["methods"] == ["length"]


def test_inspect_instance_lists_active_names(numbers_class):
    view = inspect_instance(numbers_class.new())

    assert view["public"]["active"] == ["x2"]
    assert view["public"]["fields"] == {"x": 100}
    assert view["private"] is None


def test_scope_contents_of_a_plain_scope():
    scope = Scope("plain", {"value": 1, "fn": len})

    contents = scope_contents(scope)

    assert contents["fields"] == {"value": 1}
    assert contents["methods"] == ["fn"]
    assert contents["locked"] is False


def test_tags_and_instance_checks(counting_queue_class):
    cq = counting_queue_class.new()

    assert is_instance(cq)
    assert not is_instance(Scope("plain"))
    assert inherits(cq, "Queue")
    assert not inherits(cq, "Stack")
    assert not inherits("text", "Queue")


def test_inspect_instance_rejects_foreign_instances():
    from refclass import Instance

    with pytest.raises(RuntimeError):
        inspect_instance(Instance("detached"))


def test_list_meta_ops_reports_available_helpers():
    ops = list_meta_ops()

    assert set(ops) == {
        "reflect",
        "inspect_instance",
        "class_tags",
        "inherits",
        "list_meta_ops",
    }


def test_untagged_definition_still_reflects():
    obj = define_class("Quiet", tagged=False).new()

    assert reflect(obj).to_dict()["tags"] == []

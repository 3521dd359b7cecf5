"""Tests for the unqualified (bare-name) encapsulation convention."""

import pytest

from refclass import UNQUALIFIED, ReservedNameConflict, define_class


def make_np():
    def setx(value):
        rebind("x", value)

    def shadow(value):
        x = value
        return x

    return define_class(
        "NP",
        public={
            "x": None,
            "getx": lambda: x,
            "setx": setx,
            "shadow": shadow,
            "via_self": lambda: self.x,
        },
        encapsulation=UNQUALIFIED,
    )


def test_bare_names_read_live_public_fields():
    np = make_np().new()

    np.setx(10)

    assert np.getx() == 10
    assert np.x == 10
    assert np.via_self() == 10

    np.x = 11
    assert np.getx() == 11


def test_plain_assignment_creates_a_local():
    np = make_np().new()
    np.setx(1)

    assert np.shadow(99) == 99
    assert np.x == 1


def test_rebind_reaches_private_members():
    def bump():
        rebind("total", total + 1)
        return total

    counter = define_class(
        "Tally",
        public={"bump": bump},
        private={"total": 0},
        encapsulation=UNQUALIFIED,
    ).new()

    assert counter.bump() == 1
    assert counter.bump() == 2


def test_bare_names_reach_private_methods():
    helper = define_class(
        "Helper",
        public={"run": lambda: twice(base)},
        private={"base": 21, "twice": lambda n: n * 2},
        encapsulation=UNQUALIFIED,
    ).new()

    assert helper.run() == 42


def test_rebind_of_unknown_name_raises_name_error():
    broken = define_class(
        "Broken",
        public={"set_missing": lambda: rebind("nowhere", 1)},
        encapsulation=UNQUALIFIED,
    ).new()

    with pytest.raises(NameError, match="nowhere"):
        broken.set_missing()


def test_unqualified_classes_support_super():
    base = define_class(
        "Base",
        public={"n": 1, "grow": lambda: rebind("n", n + 1)},
        encapsulation=UNQUALIFIED,
    )
    child = define_class(
        "Child",
        public={"grow": lambda: [super.grow(), super.grow()] and n},
        inherit=base,
        encapsulation=UNQUALIFIED,
    )

    assert child.new().grow() == 3


def test_qualified_classes_do_not_expose_bare_names():
    obj = define_class("Strict", public={"x": 1, "bare": lambda: x}).new()

    with pytest.raises(NameError):
        obj.bare()


def test_rebind_is_reserved_in_unqualified_definitions():
    with pytest.raises(ReservedNameConflict):
        define_class(
            "Clash", public={"rebind": lambda: None}, encapsulation=UNQUALIFIED
        )

    open_class = define_class("Open", public={"x": 1}, encapsulation=UNQUALIFIED)
    with pytest.raises(ReservedNameConflict):
        open_class.set("private", "rebind", 1)


def test_rebind_stays_a_member_name_in_qualified_definitions():
    obj = define_class("Plain", public={"rebind": lambda: "mine"}).new()

    assert obj.rebind() == "mine"

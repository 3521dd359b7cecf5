"""Shared class definitions for the refclass test-suite."""

from __future__ import annotations

import pytest

from refclass import MISSING, define_class


def make_queue():
    def initialize(*items):
        for item in items:
            self.add(item)

    def add(x):
        private.queue.append(x)
        return self

    def remove():
        if private.length() == 0:
            return None
        return private.queue.pop(0)

    return define_class(
        "Queue",
        public={"initialize": initialize, "add": add, "remove": remove},
        private={"queue": [], "length": lambda: len(private.queue)},
    )


def make_counting_queue(parent):
    def add(x):
        private.total += 1
        return super.add(x)

    return define_class(
        "CountingQueue",
        public={"add": add, "get_total": lambda: private.total},
        private={"total": 0},
        inherit=lambda: parent,
    )


def make_numbers():
    def x2(value=MISSING):
        if value is MISSING:
            return self.x * 2
        self.x = value / 2

    return define_class("Numbers", public={"x": 100}, active={"x2": x2})


@pytest.fixture
def queue_class():
    return make_queue()


@pytest.fixture
def counting_queue_class(queue_class):
    return make_counting_queue(queue_class)


@pytest.fixture
def numbers_class():
    return make_numbers()

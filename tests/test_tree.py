from __future__ import annotations

import pytest

from ptdb import tree
from ptdb.errors import InvalidValueError, NotArraySemanticsError, NotTraversableError
from ptdb.paths import resolve


def test_write_creates_intermediate_mappings():
    records: dict = {}
    tree.write(records, resolve("fe.fi.fo.fum"), "bar")
    assert records == {"fe": {"fi": {"fo": {"fum": "bar"}}}}
    assert tree.read(records, resolve("fe.fi.fo.fum")) == "bar"
    assert tree.read(records, resolve("fe.fi")) == {"fo": {"fum": "bar"}}


def test_write_overwrites_with_falsy_values():
    records = {"a": 1, "b": "x", "c": True}
    tree.write(records, resolve("a"), 0)
    tree.write(records, resolve("b"), "")
    tree.write(records, resolve("c"), False)
    assert records == {"a": 0, "b": "", "c": False}


def test_write_through_scalar_is_rejected():
    records = {"a": "scalar"}
    with pytest.raises(NotTraversableError) as ei:
        tree.write(records, resolve("a.b"), 1)
    assert ei.value.segment == "a"
    assert ei.value.path == "a.b"
    assert records == {"a": "scalar"}


def test_read_missing_is_none_and_creates_nothing():
    records = {"a": {}}
    assert tree.read(records, resolve("a.b.c")) is None
    assert tree.read(records, resolve("x")) is None
    assert records == {"a": {}}


def test_read_returns_a_copy():
    records = {"a": {"list": [1]}}
    got = tree.read(records, resolve("a"))
    got["list"].append(2)
    assert records == {"a": {"list": [1]}}


def test_read_lenient_treats_untraversable_as_absent():
    records = {"a": 5}
    assert tree.read_lenient(records, resolve("a.b")) is None
    with pytest.raises(NotTraversableError):
        tree.read(records, resolve("a.b"))


def test_values_are_detached_and_normalized():
    value = {"nums": (1, 2)}
    records: dict = {}
    tree.write(records, resolve("v"), value)
    value["nums"] = ()
    assert records == {"v": {"nums": [1, 2]}}


def test_unencodable_value_is_rejected_before_mutation():
    records: dict = {}
    with pytest.raises(InvalidValueError):
        tree.write(records, resolve("a.b"), {1, 2})
    with pytest.raises(InvalidValueError):
        tree.push(records, resolve("q"), float("nan"))
    assert records == {}


def test_push_and_unshift():
    records: dict = {}
    assert tree.push(records, resolve("q"), "bar") == ["bar"]
    assert tree.unshift(records, resolve("q"), "foo") == ["foo", "bar"]
    assert records == {"q": ["foo", "bar"]}


def test_pop_and_shift():
    records = {"q": ["fizz", "buzz"]}
    assert tree.pop(records, resolve("q")) == "buzz"
    assert records["q"] == ["fizz"]
    records = {"q": ["fizz", "buzz"]}
    assert tree.shift(records, resolve("q")) == "fizz"
    assert records["q"] == ["buzz"]
    assert tree.pop(records, resolve("q")) == "buzz"
    assert tree.pop(records, resolve("q")) is None
    assert tree.shift(records, resolve("q")) is None


@pytest.mark.parametrize("op", ["pop", "shift"])
def test_pop_shift_require_an_existing_sequence(op):
    records = {"s": "str"}
    with pytest.raises(NotArraySemanticsError):
        getattr(tree, op)(records, resolve("s"))
    with pytest.raises(NotArraySemanticsError):
        getattr(tree, op)(records, resolve("missing"))
    assert records == {"s": "str"}


@pytest.mark.parametrize("op", ["push", "unshift"])
def test_push_unshift_on_non_sequence(op):
    records = {"s": {"k": 1}}
    with pytest.raises(NotArraySemanticsError):
        getattr(tree, op)(records, resolve("s"), 1)
    with pytest.raises(NotArraySemanticsError):
        getattr(tree, op)(records, resolve("."), 1)


def test_unset():
    records = {"a": {"b": 1, "c": 2}}
    assert tree.unset(records, resolve("a.b")) is True
    assert records == {"a": {"c": 2}}
    assert tree.unset(records, resolve("a.b")) is False
    assert tree.unset(records, resolve("x.y.z")) is False
    assert records == {"a": {"c": 2}}
    with pytest.raises(NotTraversableError):
        tree.unset(records, resolve("a.c.d"))

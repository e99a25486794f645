from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

import pytest

from pyreactive.core.observable import Observable
from pyreactive.core.validator import ListOf, Validator, normalize_type


@dataclass(frozen=True)
class Celsius:
    degrees: float

    @classmethod
    def _param_conversion(cls, value, validate_only):
        return cls(float(value))


@pytest.mark.parametrize(
    "declared, expected",
    [
        ([], ListOf()),
        (list, ListOf()),
        ([str], ListOf(str)),
        (List[int], ListOf(int)),
        (str, str),
        (None, None),
    ],
)
def test_normalize_type(declared, expected) -> None:
    assert normalize_type(declared) == expected


def test_normalize_callable_spellings() -> None:
    import collections.abc

    assert normalize_type(Callable) is collections.abc.Callable
    assert normalize_type(callable) is collections.abc.Callable


def test_missing_required_comes_before_type_mismatch() -> None:
    v = Validator()
    v.optional("size", default=1, type=int)
    v.requires("foo")
    v.requires("bar", type=str)

    assert v.validate({"size": "big"}) == [
        "Required prop `foo` was not specified",
        "Required prop `bar` was not specified",
        "Provided prop `size` could not be converted to int",
    ]


def test_list_item_violation_names_the_index() -> None:
    v = Validator()
    v.requires("foo", type=[str])
    assert v.validate({"foo": ["ok", 10]}) == ["Provided prop `foo`[1] could not be converted to str"]
    assert v.validate({"foo": "nope"}) == ["Provided prop `foo` could not be converted to list"]


def test_nil_is_allowed_for_optional_params_and_when_asked() -> None:
    v = Validator()
    v.optional("a", default=None, type=str)
    v.requires("b", type=str, allow_nil=True)
    v.requires("c", type=str)
    assert v.validate({"a": None, "b": None, "c": None}) == [
        "Provided prop `c` could not be converted to str"
    ]


def test_conversion_hook_decides_conformance() -> None:
    v = Validator()
    v.requires("temp", type=Celsius)
    assert v.validate({"temp": "21.5"}) == []
    assert v.validate({"temp": Celsius(3)}) == []
    assert v.validate({"temp": "hot"}) == ["Provided prop `temp` could not be converted to Celsius"]


def test_coerce_converts_scalars_and_list_items() -> None:
    v = Validator()
    v.requires("temp", type=Celsius)
    v.optional("history", default=None, type=[Celsius])

    coerced = v.coerce({"temp": "20", "history": ["1", 2], "other": "x"})

    assert coerced == {"temp": Celsius(20.0), "history": [Celsius(1.0), Celsius(2.0)], "other": "x"}


def test_coerce_is_idempotent() -> None:
    v = Validator()
    v.requires("temp", type=Celsius)
    v.requires("name", type=str)
    once = v.coerce({"temp": "20", "name": "x"})
    assert v.coerce(once) == once


def test_coerce_keeps_raw_value_when_conversion_fails() -> None:
    v = Validator()
    v.requires("temp", type=Celsius)
    assert v.coerce_value("temp", "hot") == "hot"


def test_callable_and_observable_types() -> None:
    v = Validator()
    v.requires("on_click", type=Callable)
    v.requires("value", type=Observable)
    assert v.validate({"on_click": print, "value": Observable(1)}) == []
    assert v.validate({"on_click": 1, "value": 1}) == [
        "Provided prop `on_click` could not be converted to Callable",
        "Provided prop `value` could not be converted to Observable",
    ]


def test_copy_does_not_leak_into_parent() -> None:
    parent = Validator()
    parent.requires("a")
    child = parent.copy()
    child.requires("b")
    child.all_others("rest")
    assert "b" not in parent
    assert parent.others_name is None
    assert [d.name for d in child.declarations] == ["a", "b"]


def test_default_props_and_collect_all_others() -> None:
    v = Validator()
    v.requires("a")
    v.optional("b", default="x")
    v.all_others("rest")
    assert v.default_props() == {"b": "x"}
    assert v.collect_all_others({"a": 1, "b": 2, "c": 3, "children": []}) == {"c": 3}

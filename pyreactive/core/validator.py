# validator.py ----------------------------------------------------
import collections.abc
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .observable import Observable

_MISSING = object()


@dataclass(frozen=True)
class ListOf:
    """``[T]`` param type: a list whose items conform to ``item_type`` (any item if ``None``)."""

    item_type: Any = None


@dataclass(frozen=True)
class ParamDeclaration:
    name: str
    required: bool = True
    default: Any = None
    type: Any = None
    allow_nil: bool = False


def normalize_type(declared: Any) -> Any:
    """Map the accepted spellings of a param type onto one representation.

    ``[]`` and ``list`` become ``ListOf()``, ``[str]`` and ``list[str]`` become
    ``ListOf(str)``, ``typing.Callable``/``callable`` become
    ``collections.abc.Callable``.
    """
    if declared is None:
        return None
    if isinstance(declared, ListOf):
        return declared
    if isinstance(declared, list):
        if len(declared) > 1:
            raise TypeError(f"list param types take at most one item type, got {declared!r}")
        return ListOf(normalize_type(declared[0]) if declared else None)
    if declared is list:
        return ListOf()
    if declared is callable:
        return collections.abc.Callable
    origin = typing.get_origin(declared)
    if origin is list:
        args = typing.get_args(declared)
        return ListOf(normalize_type(args[0]) if args else None)
    if origin is collections.abc.Callable or declared is collections.abc.Callable:
        return collections.abc.Callable
    return declared


def type_name(declared: Any) -> str:
    if isinstance(declared, ListOf):
        return "list"
    if declared is collections.abc.Callable:
        return "Callable"
    return getattr(declared, "__name__", repr(declared))


def has_conversion(declared: Any) -> bool:
    return callable(getattr(declared, "_param_conversion", None))


def is_callable_type(declared: Any) -> bool:
    return declared is collections.abc.Callable


def is_observable_type(declared: Any) -> bool:
    return declared is Observable


def _conforms(value: Any, declared: Any) -> bool:
    if declared is None:
        return True
    if has_conversion(declared):
        if isinstance(declared, type) and isinstance(value, declared):
            return True
        try:
            return declared._param_conversion(value, True) is not None
        except (TypeError, ValueError, KeyError, AttributeError):
            return False
    if is_callable_type(declared):
        return callable(value)
    if isinstance(declared, type):
        return isinstance(value, declared)
    return value == declared


def _convert(value: Any, declared: Any) -> Any:
    if not has_conversion(declared):
        return value
    if isinstance(declared, type) and isinstance(value, declared):
        return value
    try:
        return declared._param_conversion(value, False)
    except (TypeError, ValueError, KeyError, AttributeError):
        # already reported by validation; keep the raw value
        return value


class Validator:
    """Param declarations for one component class.

    Built once while the class is created and copied for every subclass, so a
    subclass can add or redeclare params without touching its parent.
    """

    def __init__(self) -> None:
        self._declarations: Dict[str, ParamDeclaration] = {}
        self._all_others: Optional[str] = None

    def copy(self) -> "Validator":
        clone = Validator()
        clone._declarations = dict(self._declarations)
        clone._all_others = self._all_others
        return clone

    # ---------------- declaration ----------------
    def requires(self, name: str, *, type: Any = None, allow_nil: bool = False) -> ParamDeclaration:
        decl = ParamDeclaration(
            name=name, required=True, type=normalize_type(type), allow_nil=allow_nil
        )
        self._declarations[name] = decl
        return decl

    def optional(
        self,
        name: str,
        *,
        default: Any = None,
        type: Any = None,
        allow_nil: Optional[bool] = None,
    ) -> ParamDeclaration:
        if allow_nil is None:
            allow_nil = default is None
        decl = ParamDeclaration(
            name=name,
            required=False,
            default=default,
            type=normalize_type(type),
            allow_nil=allow_nil,
        )
        self._declarations[name] = decl
        return decl

    def all_others(self, name: str) -> None:
        self._all_others = name

    # ---------------- introspection ----------------
    @property
    def declarations(self) -> List[ParamDeclaration]:
        return list(self._declarations.values())

    @property
    def others_name(self) -> Optional[str]:
        return self._all_others

    def declaration(self, name: str) -> Optional[ParamDeclaration]:
        return self._declarations.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._declarations

    def __bool__(self) -> bool:
        return bool(self._declarations) or self._all_others is not None

    def default_props(self) -> Dict[str, Any]:
        return {d.name: d.default for d in self._declarations.values() if not d.required}

    def collect_all_others(self, props: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            k: v
            for k, v in props.items()
            if k not in self._declarations and k != "children"
        }

    # ---------------- validation ----------------
    def validate(self, props: Mapping[str, Any]) -> List[str]:
        """Return human readable violations; required misses come before type errors."""
        missing: List[str] = []
        mismatched: List[str] = []

        for decl in self._declarations.values():
            value = props.get(decl.name, _MISSING)
            if value is _MISSING:
                if decl.required:
                    missing.append(f"Required prop `{decl.name}` was not specified")
                continue
            if value is None and (decl.allow_nil or not decl.required):
                continue
            mismatched.extend(self._type_violations(decl, value))

        return missing + mismatched

    def _type_violations(self, decl: ParamDeclaration, value: Any) -> List[str]:
        declared = decl.type
        if declared is None:
            return []

        if isinstance(declared, ListOf):
            if not isinstance(value, list):
                return [f"Provided prop `{decl.name}` could not be converted to list"]
            return [
                f"Provided prop `{decl.name}`[{i}] could not be converted to "
                f"{type_name(declared.item_type)}"
                for i, item in enumerate(value)
                if not _conforms(item, declared.item_type)
            ]

        if not _conforms(value, declared):
            return [
                f"Provided prop `{decl.name}` could not be converted to {type_name(declared)}"
            ]
        return []

    # ---------------- coercion ----------------
    def coerce_value(self, name: str, value: Any) -> Any:
        """Best-effort conversion of one param through its type's conversion hook."""
        decl = self._declarations.get(name)
        if decl is None or decl.type is None or value is None:
            return value

        declared = decl.type
        if isinstance(declared, ListOf):
            if has_conversion(declared.item_type) and isinstance(value, list):
                return [_convert(item, declared.item_type) for item in value]
            return value
        return _convert(value, declared)

    def coerce(self, props: Mapping[str, Any]) -> Dict[str, Any]:
        coerced = dict(props)
        for name in self._declarations:
            if name in coerced:
                coerced[name] = self.coerce_value(name, coerced[name])
        return coerced


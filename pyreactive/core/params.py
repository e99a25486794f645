# params.py ----------------------------------------------------
from collections.abc import Mapping
from functools import partial
from typing import Any, Callable, Optional

from .observable import Observable
from .state import store
from .validator import ParamDeclaration, Validator, is_callable_type, is_observable_type

_MISSING = object()
REQUIRED = _MISSING


class Params(Mapping):
    """Read-only view over a native props object.

    Item access returns raw values; attribute access goes through the
    component's declared accessors (coerced, memoized) when bound to one::

        params["foo"]   # raw
        params.foo      # coerced when ``foo`` is declared
    """

    def __init__(self, props: Optional[Mapping[str, Any]], component=None):
        self._props = dict(props or {})
        self._component = component

    def __getitem__(self, key: str) -> Any:
        return self._props[key]

    def __iter__(self):
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        component = self._component
        if component is not None and name in type(component)._validator:
            return getattr(component, name)
        try:
            return self._props[name]
        except KeyError:
            raise AttributeError(f"no param named {name!r}") from None

    def __repr__(self) -> str:
        return f"Params({self._props!r})"


class Param:
    """Declare a component param.

    ``Param()`` is required, ``Param("x")``/``Param(default="x")`` is optional.
    ``type`` accepts a class, ``[]``/``list``, ``[T]``, ``Callable`` or
    ``Observable``.
    """

    def __init__(
        self,
        default: Any = REQUIRED,
        *,
        type: Any = None,
        allow_nil: Optional[bool] = None,
    ):
        self.default = default
        self.type = type
        self.allow_nil = allow_nil
        self.name: Optional[str] = None
        self.declaration: Optional[ParamDeclaration] = None

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    @property
    def required(self) -> bool:
        return self.default is REQUIRED

    def declare(self, validator: Validator) -> ParamDeclaration:
        if self.required:
            self.declaration = validator.requires(
                self.name, type=self.type, allow_nil=bool(self.allow_nil)
            )
        else:
            self.declaration = validator.optional(
                self.name, default=self.default, type=self.type, allow_nil=self.allow_nil
            )
        return self.declaration

    @property
    def is_two_way(self) -> bool:
        return self.declaration is not None and is_observable_type(self.declaration.type)

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        props = obj._require_native("params").props
        declared = self.declaration.type

        if is_observable_type(declared):
            observable = props.get(self.name)
            return observable.value if isinstance(observable, Observable) else observable

        if is_callable_type(declared):
            return partial(_invoke, props.get(self.name))

        cache = obj._processed_params
        if self.name not in cache:
            cache[self.name] = type(obj)._validator.coerce_value(
                self.name, props.get(self.name)
            )
        return cache[self.name]

    def __set__(self, obj, value):
        raise AttributeError(f"param {self.name!r} is read-only")


def _invoke(fn, *args, **kwargs):
    if fn is None:
        return None
    return fn(*args, **kwargs)


class OtherParams:
    """Collect every undeclared param into one dict."""

    def __init__(self):
        self.name: Optional[str] = None

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def declare(self, validator: Validator) -> None:
        validator.all_others(self.name)

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        cache = obj._processed_params
        if self.name not in cache:
            props = obj._require_native("params").props
            cache[self.name] = type(obj)._validator.collect_all_others(props)
        return cache[self.name]


class State:
    """Declared state field routed through the state store.

    ``self.name`` reads, ``self.name = v`` writes, ``self.bang.name()``
    returns an :class:`Observable` bound to the field and
    ``self.bang.name(v)`` writes and returns the previous value.
    ``on_change(name, old, new)`` runs before every write.
    """

    exported = False

    def __init__(
        self,
        default: Any = None,
        *,
        factory: Optional[Callable[[], Any]] = None,
        on_change: Optional[Callable[[str, Any, Any], Any]] = None,
    ):
        self.default = default
        self.factory = factory
        self.on_change = on_change
        self.name: Optional[str] = None
        self.declared_on = None

    def __set_name__(self, owner, name: str) -> None:
        self.name = name
        self.declared_on = owner

    def initial_value(self) -> Any:
        return self.factory() if self.factory is not None else self.default

    def owner_of(self, obj):
        if not isinstance(obj, type):
            obj._require_native("state")
        return obj

    def _ensure(self, owner) -> None:
        if not store.has(owner, self.name):
            store.initialize_states(owner, {self.name: self.initial_value()})

    def read(self, owner) -> Any:
        self._ensure(owner)
        return store.get(owner, self.name)

    def write(self, owner, value: Any) -> Any:
        self._ensure(owner)
        if self.on_change is not None:
            self.on_change(self.name, store.get(owner, self.name, observer=None), value)
        return store.set(owner, self.name, value)

    def bang(self, obj, value: Any = _MISSING) -> Any:
        owner = self.owner_of(obj)
        if value is _MISSING:
            # owner is re-checked on each write
            return Observable(
                self.read(owner), lambda update: self.write(self.owner_of(obj), update)
            )
        previous = self.read(owner)
        self.write(owner, value)
        return previous

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return self.read(self.owner_of(obj))

    def __set__(self, obj, value):
        self.write(self.owner_of(obj), value)


class ExportedState(State):
    """State owned by the declaring class and shared by all of its instances."""

    exported = True

    def owner_of(self, obj):
        return self.declared_on

    def __get__(self, obj, objtype=None):
        return self.read(self.declared_on)


class _Bang:
    """``name!`` accessors: ``bang.name()`` binds, ``bang.name(v)`` writes."""

    def __init__(self, target):
        self._target = target

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)
        target = self._target
        cls = target if isinstance(target, type) else type(target)

        field = cls._state_fields.get(name)
        if field is not None and (field.exported or not isinstance(target, type)):
            return partial(field.bang, target)

        if not isinstance(target, type) and name in cls._two_way_params:
            return partial(_two_way_bang, target, name)

        raise AttributeError(f"{cls.__name__} has no state or two-way param named {name!r}")


def _two_way_bang(component, name: str, value: Any = _MISSING) -> Any:
    observable = component._require_native("params").props.get(name)
    if observable is None:
        return None
    if value is _MISSING:
        return observable
    return observable(value)


class BangAccessor:
    def __get__(self, obj, objtype=None):
        return _Bang(obj if obj is not None else objtype)

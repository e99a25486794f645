from typing import Any, Callable, Optional

_MISSING = object()


class Observable:
    """Two-way bound value.

    ``obs()`` returns the current value. ``obs(new)`` hands ``new`` to the
    change callback, remembers it and returns the previous value, so a child
    can request a change that its owner ultimately commits.

    Attribute access is proxied to the wrapped value; calling a proxied
    method reports the (possibly mutated) value back through the callback::

        items = Observable([], on_change=save)
        items.append(1)   # save([1])
    """

    __slots__ = ("_value", "_on_change")

    def __init__(self, value: Any, on_change: Optional[Callable[[Any], Any]] = None):
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_on_change", on_change)

    @property
    def value(self) -> Any:
        return self._value

    def __call__(self, new_value: Any = _MISSING) -> Any:
        if new_value is _MISSING:
            return self._value
        previous = self._value
        if self._on_change is not None:
            self._on_change(new_value)
        object.__setattr__(self, "_value", new_value)
        return previous

    def as_callback(self) -> Callable[..., Any]:
        """One-arg callable suitable as an event handler (defaults to the current value)."""

        def _cb(arg: Any = _MISSING) -> Any:
            return self(self._value if arg is _MISSING else arg)

        return _cb

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in Observable.__slots__:
            raise AttributeError(name)
        attr = getattr(self._value, name)
        if not callable(attr):
            return attr

        def _proxied(*args, **kwargs):
            result = attr(*args, **kwargs)
            if self._on_change is not None:
                self._on_change(self._value)
            return result

        return _proxied

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Observable is read-only; call it with a new value instead")

    def __repr__(self) -> str:
        return f"<Observable {self._value!r}>"

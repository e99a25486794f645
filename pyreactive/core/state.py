# state.py ----------------------------------------------------
import time
from collections import defaultdict
from typing import Any, Dict, Hashable, Mapping, Optional, Set

from .core import component_context, current_component

# Hidden entry stamped on every native state bag written through the store.
# The update decision compares it to notice writes that equality cannot see
# (e.g. a nested list mutated in place).
STATE_UPDATED_AT = "***_state_updated_at-***"

_MISSING = object()


class StateStore:
    """Per-owner key/value store for declared component state.

    Owners are component instances or, for exported state, component classes.
    While a lifecycle hook or render runs, the running component is the
    *current observer*: every ``get`` records a dependency, and after the pass
    ``update_states_to_observe`` commits those dependencies so that a later
    ``set`` on the same ``(owner, name)`` reaches the observer's native state.
    """

    def __init__(self) -> None:
        self._states: Dict[Hashable, Dict[str, Any]] = {}
        # observer -> owner -> names read during the running pass
        self._new_observers: Dict[Hashable, Dict[Hashable, Set[str]]] = defaultdict(
            lambda: defaultdict(set)
        )
        # observer -> owner -> names committed by the last pass
        self._current_observers: Dict[Hashable, Dict[Hashable, Set[str]]] = {}
        # owner -> name -> observers (ordered by subscription)
        self._observers_by_name: Dict[Hashable, Dict[str, list]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._last_stamp: float = 0.0

    # ---------------- entries ----------------
    def initialize_states(self, owner, declarations: Optional[Mapping[str, Any]]) -> None:
        """Install declared defaults for names ``owner`` does not hold yet."""
        bag = self._states.setdefault(owner, {})
        for name, value in (declarations or {}).items():
            if name not in bag:
                bag[name] = value

    def get(self, owner, name: str, observer: Any = _MISSING) -> Any:
        if observer is _MISSING:
            observer = current_component()
        if observer is not None:
            self._new_observers[observer][owner].add(name)
        return self._states.get(owner, {}).get(name)

    def set(self, owner, name: str, value: Any) -> Any:
        """Write an entry of an owner set up by ``initialize_states`` and notify observers."""
        bag = self._states.get(owner)
        if bag is None:
            raise KeyError(f"no state is held for {owner!r}")
        bag[name] = value

        owner_needs_notification = not isinstance(owner, type) and hasattr(
            owner, "update_native_state"
        )
        for observer in list(self._observers_by_name.get(owner, {}).get(name, ())):
            observer.update_native_state(owner, name, value)
            if observer is owner:
                owner_needs_notification = False
        if owner_needs_notification:
            owner.update_native_state(None, name, value)
        return value

    def has(self, owner, name: str) -> bool:
        return owner in self._states and name in self._states[owner]

    def states_of(self, owner) -> Dict[str, Any]:
        return dict(self._states.get(owner, {}))

    def stamp(self) -> float:
        """Strictly increasing timestamp for the hidden updated-at entry."""
        now = time.time()
        if now <= self._last_stamp:
            now = self._last_stamp + 1e-6
        self._last_stamp = now
        return now

    # ---------------- observation ----------------
    def with_context(self, owner):
        return component_context(owner)

    def is_observing(self, owner, name: str, observer) -> bool:
        return observer in self._observers_by_name.get(owner, {}).get(name, [])

    def update_states_to_observe(self, observer: Any = _MISSING) -> None:
        if observer is _MISSING:
            observer = current_component()
        if observer is None:
            raise RuntimeError("update_states_to_observe called outside of a component context")

        for owner, names in self._current_observers.get(observer, {}).items():
            for name in names:
                subs = self._observers_by_name[owner][name]
                if observer in subs:
                    subs.remove(observer)

        observers = self._new_observers.pop(observer, {})
        self._current_observers[observer] = observers
        for owner, names in observers.items():
            for name in names:
                self._observers_by_name[owner][name].append(observer)

    def remove(self, owner: Any = _MISSING) -> None:
        """Drop everything held for ``owner`` (defaults to the current component)."""
        if owner is _MISSING:
            owner = current_component()
        if owner is None:
            raise RuntimeError("remove called outside of a component context")

        for watched, names in self._current_observers.pop(owner, {}).items():
            for name in names:
                subs = self._observers_by_name.get(watched, {}).get(name)
                if subs and owner in subs:
                    subs.remove(owner)
        self._new_observers.pop(owner, None)
        self._observers_by_name.pop(owner, None)
        self._states.pop(owner, None)

    def reset(self) -> None:
        self.__init__()


store = StateStore()

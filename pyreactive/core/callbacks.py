# callbacks.py ----------------------------------------------------
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

LIFECYCLE_HOOKS = (
    "before_mount",
    "after_mount",
    "before_receive_props",
    "before_update",
    "after_update",
    "before_unmount",
)


@dataclass
class HookOutcome:
    """Result of running one lifecycle hook chain."""

    hook: str
    ran: int = 0
    errors: List[BaseException] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def fail(self, error: BaseException) -> "HookOutcome":
        self.errors.append(error)
        return self


def _hook_decorator(hook_name: str):
    def decorator(fn):
        fn.__lifecycle_hooks__ = getattr(fn, "__lifecycle_hooks__", ()) + (hook_name,)
        return fn

    decorator.__name__ = hook_name
    decorator.__doc__ = f"Run the decorated method on ``{hook_name}``."
    return decorator


before_mount = _hook_decorator("before_mount")
after_mount = _hook_decorator("after_mount")
before_receive_props = _hook_decorator("before_receive_props")
before_update = _hook_decorator("before_update")
after_update = _hook_decorator("after_update")
before_unmount = _hook_decorator("before_unmount")


class Callbacks:
    """Mixin holding per-class lifecycle hook chains.

    Chains are copied when a subclass is created, so parent hooks always run
    before the hooks a subclass adds.
    """

    _callbacks: Dict[str, Tuple[Callable, ...]] = {name: () for name in LIFECYCLE_HOOKS}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        chains = {name: tuple(fns) for name, fns in cls._callbacks.items()}
        for attr in cls.__dict__.values():
            for hook_name in getattr(attr, "__lifecycle_hooks__", ()):
                chains[hook_name] = chains[hook_name] + (attr,)
        cls._callbacks = chains

    @classmethod
    def add_callback(cls, hook_name: str, fn: Callable) -> None:
        if hook_name not in cls._callbacks:
            raise ValueError(f"unknown lifecycle hook {hook_name!r}")
        cls._callbacks = {**cls._callbacks, hook_name: cls._callbacks[hook_name] + (fn,)}

    def run_callback(self, hook_name: str, *args) -> HookOutcome:
        outcome = HookOutcome(hook_name)
        for fn in type(self)._callbacks.get(hook_name, ()):
            try:
                fn(self, *args)
            except Exception as e:
                # remaining hooks in the chain are skipped
                return outcome.fail(e)
            outcome.ran += 1
        return outcome

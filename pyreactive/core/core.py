# core.py ----------------------------------------------------
from contextlib import contextmanager
from contextvars import ContextVar

# Component (or exported-state owner) currently running a lifecycle hook or
# render. Context variables keep this private to the running thread/task.
_context_stack = ContextVar("component_context", default=None)


def current_component():
    return _context_stack.get()


@contextmanager
def component_context(owner):
    """Make ``owner`` the current component for the duration of the block."""
    token = _context_stack.set(owner)
    try:
        yield owner
    finally:
        _context_stack.reset(token)


class _CurrentProxy:

    def __getattr__(self, name):
        # resolve against whichever component is rendering right now
        comp = _context_stack.get()
        if comp is None:
            raise RuntimeError(
                f"current.{name} can only be used during render or a lifecycle hook."
            )
        return getattr(comp, name)

    def __bool__(self):
        return _context_stack.get() is not None


current = _CurrentProxy()

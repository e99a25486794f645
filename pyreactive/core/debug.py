"""Debug helpers for inspecting element trees and re-render traces.

Tree printing works on anything exposing ``name``, ``props`` and
``children`` (elements and the reference engine's mounted nodes); plain
strings are printed as text nodes. This module imports nothing from the rest
of the package so the engine can use it without import cycles.
"""

import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, List, Optional, Tuple

RESET = "\x1b[0m"
DIM = "\x1b[2m"
FG_GRAY = "\x1b[90m"
FG_YELLOW = "\x1b[33m"
FG_MAGENTA = "\x1b[35m"
FG_CYAN = "\x1b[36m"
FG_BLUE = "\x1b[34m"
FG_GREEN = "\x1b[32m"


def _fmt_val(v: Any, depth: int = 0) -> str:
    if depth > 1:
        return f"{DIM}…{RESET}"
    if v is None or isinstance(v, bool):
        return f"{FG_CYAN}{v!r}{RESET}"
    if isinstance(v, (int, float)):
        return f"{FG_BLUE}{v!r}{RESET}"
    if isinstance(v, str):
        s = v.replace("\n", "\\n")
        text = s if len(s) <= 60 else s[:57] + "…"
        return f"{FG_YELLOW}{text!r}{RESET}"
    if isinstance(v, (list, tuple)):
        return f"{FG_CYAN}[{len(v)}]{RESET}"
    if isinstance(v, dict):
        items = []
        for i, (k, val) in enumerate(v.items()):
            if i >= 5:
                items.append(f"{DIM}…{RESET}")
                break
            items.append(f"{FG_CYAN}{k}{RESET}={_fmt_val(val, depth + 1)}")
        return "{" + ", ".join(items) + "}"
    if callable(v):
        name = getattr(v, "__name__", None) or type(v).__name__
        return f"{FG_GREEN}<fn {name}>{RESET}"
    return f"{FG_GREEN}<{type(v).__name__}>{RESET}"


def format_tree(node: Any, indent: int = 0) -> List[str]:
    pad = "  " * indent
    if isinstance(node, str):
        return [f"{pad}{FG_GRAY}-{RESET} {_fmt_val(node)}"]

    name = getattr(node, "name", type(node).__name__)
    key = getattr(node, "key", None)
    key_part = f" {FG_GRAY}key={RESET}{FG_YELLOW}{key!r}{RESET}" if key is not None else ""
    props = {k: v for k, v in (getattr(node, "props", None) or {}).items() if k != "children"}
    props_part = f" {FG_GRAY}props={RESET}{_fmt_val(props)}" if props else ""

    lines = [f"{pad}{FG_GRAY}-{RESET} {FG_MAGENTA}{name}{RESET}{key_part}{props_part}"]
    for child in getattr(node, "children", None) or ():
        lines.extend(format_tree(child, indent + 1))
    return lines


def render_tree(node: Any, indent: int = 0) -> None:
    """Pretty-print the tree starting at ``node`` to stdout."""
    print("\n".join(format_tree(node, indent)))


# ----------------------------------------------------------------------------
# Update traces
#
# A trace covers one queued update drained by ``Engine.run_renders``: the
# engine requests that queued it (``set_state``, ``set_props``,
# ``force_update``) and every component rendered while applying it, with the
# lifecycle phase (``mount`` for children created by the update, ``update``
# otherwise) and the nesting depth.
# ----------------------------------------------------------------------------

_enabled: bool = False
_traces: List[Dict[str, Any]] = []
_TRACE_LIMIT = 50

_active: ContextVar[Optional[Dict[str, Any]]] = ContextVar("pyreactive_trace", default=None)
_depth: ContextVar[int] = ContextVar("pyreactive_trace_depth", default=0)

Cause = Tuple[str, Optional[str]]


def _label(native: Any) -> str:
    return getattr(native, "name", type(native).__name__)


def record_schedule(native: Any, cause: str, detail: Optional[str] = None) -> None:
    """Remember which engine request queued ``native``."""
    if not _enabled:
        return
    native.__dict__.setdefault("_trace_causes", []).append((cause, detail))


@contextmanager
def update_pass(native: Any):
    if not _enabled:
        yield None
        return
    trace = {
        "root": _label(native),
        "causes": native.__dict__.pop("_trace_causes", []),
        "started": time.time(),
        "elapsed": None,
        "renders": [],
    }
    _traces.append(trace)
    del _traces[:-_TRACE_LIMIT]
    token = _active.set(trace)
    try:
        yield trace
    finally:
        trace["elapsed"] = time.time() - trace["started"]
        _active.reset(token)


@contextmanager
def rendering(native: Any, phase: str):
    """Record one render of ``native`` inside the active trace, if any."""
    trace = _active.get()
    if trace is None:
        yield
        return
    depth = _depth.get()
    trace["renders"].append(
        {"name": _label(native), "phase": phase, "depth": depth, "key": getattr(native, "key", None)}
    )
    token = _depth.set(depth + 1)
    try:
        yield
    finally:
        _depth.reset(token)


def _fmt_cause(cause: Cause) -> str:
    name, detail = cause
    return f"{name}({detail})" if detail else name


def format_trace(trace: Dict[str, Any]) -> List[str]:
    causes = ", ".join(_fmt_cause(c) for c in trace["causes"]) or "-"
    lines = [
        f"{FG_GRAY}root:{RESET} {FG_YELLOW}{trace['root']}{RESET}",
        f"{FG_GRAY}queued by:{RESET} {causes}",
    ]
    for render in trace["renders"]:
        pad = "  " * render["depth"]
        key = f" key={render['key']!r}" if render["key"] is not None else ""
        lines.append(f"{pad}- {FG_MAGENTA}{render['name']}{RESET}{key} {DIM}[{render['phase']}]{RESET}")
    return lines


def last_trace() -> Optional[Dict[str, Any]]:
    return _traces[-1] if _traces else None


def print_last_trace() -> None:
    trace = last_trace()
    if trace is None:
        print(f"{FG_GRAY}[debug]{RESET} no update has been traced yet.")
        return
    print(f"\n{FG_CYAN}=== Update Trace ==={RESET}")
    print("\n".join(format_trace(trace)))


def enable_tracing() -> None:
    global _enabled
    _enabled = True


def disable_tracing() -> None:
    global _enabled
    _enabled = False


def is_tracing_enabled() -> bool:
    return _enabled


def clear_traces() -> None:
    del _traces[:]

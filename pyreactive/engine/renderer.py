# pyreactive/engine/renderer.py
from typing import Any, Dict
import html as _htmllib

from pyreactive.core.observable import Observable
from pyreactive.core.tags import VOID_TAGS

from .native import HostNode, NativeComponent, TextNode
from .runtime import Engine

_RENAMED = {"className": "class", "class_": "class", "htmlFor": "for", "for_": "for"}


def _escape(s: Any) -> str:
    return _htmllib.escape("" if s is None else str(s), quote=True)


def _style_to_str(v: Any) -> str:
    """Convert a style dict to a CSS string.

    Example: ``{"font_size":"14px","background-color":"#fff"} -> "font-size:14px;background-color:#fff"``
    """
    if isinstance(v, dict):
        parts = []
        for k, val in v.items():
            k = k.replace("_", "-")
            parts.append(f"{k}:{val}")
        return ";".join(parts)
    return str(v)


def _attrs_to_str(props: Dict[str, Any]) -> str:
    """Convert props into HTML attributes.

    Rules:
      - ``className`` / ``class_`` -> ``class``
      - ``data_xxx`` -> ``data-xxx``, ``aria_xxx`` -> ``aria-xxx``
      - style dict -> ``style="k:v;..."``
      - ``True`` values -> boolean attributes (e.g., ``disabled``)
      - lists/tuples -> ``' '.join(...)``
      - event handlers and observables are not markup and are skipped
    """
    if not props:
        return ""

    out = []
    for k, v in props.items():
        if k in ("children", "key", "ref"):
            continue
        if v is None or isinstance(v, Observable) or callable(v):
            continue

        k = _RENAMED.get(k, k)
        if k.startswith("data_"):
            k = "data-" + k[5:].replace("_", "-")
        elif k.startswith("aria_"):
            k = "aria-" + k[5:].replace("_", "-")

        if isinstance(v, (list, tuple)):
            v = " ".join(map(str, v))
        elif k == "style":
            v = _style_to_str(v)

        if v is True:
            out.append(k)
            continue
        if v is False:
            continue

        out.append(f'{k}="{_escape(v)}"')

    return (" " + " ".join(out)) if out else ""


def render_mounted(node: Any) -> str:
    """Render a mounted node (and everything under it) into an HTML string."""
    if node is None:
        return ""
    if isinstance(node, TextNode):
        return _escape(node.value)
    if isinstance(node, NativeComponent):
        return render_mounted(node.rendered)
    if isinstance(node, HostNode):
        attrs = _attrs_to_str(node.props)
        if node.tag in VOID_TAGS:
            return f"<{node.tag}{attrs}>"
        inner = "".join(render_mounted(ch) for ch in node.children)
        return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
    return _escape(node)


def render_to_static_markup(element: Any) -> str:
    """Render ``element`` once, without did-mount hooks, and return its HTML."""
    engine = Engine(static=True)
    try:
        root = engine.mount(element)
        return render_mounted(root)
    finally:
        engine.release()

# top_level.py ----------------------------------------------------
import importlib
from typing import Any, Iterable, List, Optional, Sequence, Union

from ..config import get_settings
from .component import Component
from .element import is_component_class
from .exceptions import ComponentNotFound
from .params import Param

SearchRoot = Union[str, Any]


def _split(name: str) -> List[str]:
    return [part for part in name.replace("::", ".").split(".") if part]


def _scope_label(scope: Any) -> str:
    return getattr(scope, "__qualname__", None) or getattr(scope, "__name__", repr(scope))


def _dig(scope: Any, parts: Sequence[str]) -> Any:
    obj = scope
    for part in parts:
        obj = getattr(obj, part, None)
        if obj is None:
            return None
    return obj


def _import_qualified(parts: Sequence[str]) -> Any:
    """Import the longest module prefix of ``parts`` and walk the rest as attributes."""
    for split in range(len(parts), 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            continue
        return _dig(module, parts[split:])
    return None


def load_search_path(search_path: Optional[Iterable[SearchRoot]] = None) -> List[Any]:
    """Turn module names into modules; defaults to ``PYREACTIVE_COMPONENT_PATH``."""
    if search_path is None:
        search_path = get_settings().component_path
    roots = []
    for root in search_path:
        roots.append(importlib.import_module(root) if isinstance(root, str) else root)
    return roots


def resolve_top_level(
    controller: str,
    component_name: str,
    search_path: Optional[Iterable[SearchRoot]] = None,
) -> type:
    """Find the component class a host request asks for.

    A name starting with ``::`` is fully qualified (``::package.module::Class``)
    and is imported directly. Otherwise every search root is tried with
    ``<controller>::<name>`` first, then every root with ``<name>`` alone; the
    first component class found wins.
    """
    paths_searched: List[str] = []

    if component_name.startswith("::"):
        parts = _split(component_name[2:])
        paths_searched.append("::".join(parts))
        found = _import_qualified(parts)
        if is_component_class(found):
            return found
        raise ComponentNotFound(component_name, controller, paths_searched)

    roots = load_search_path(search_path)
    name_parts = _split(component_name)
    controller_parts = _split(controller or "")

    for root in roots:
        parts = controller_parts + name_parts
        paths_searched.append("::".join([_scope_label(root)] + parts))
        found = _dig(root, parts)
        if is_component_class(found):
            return found

    for root in roots:
        paths_searched.append("::".join([_scope_label(root)] + name_parts))
        found = _dig(root, name_parts)
        if is_component_class(found):
            return found

    raise ComponentNotFound(component_name, controller, paths_searched)


class TopLevelComponent(Component):
    """Entry component a host uses to render ``component_name`` for ``controller``."""

    controller = Param(type=str)
    component_name = Param(type=str)
    render_params = Param(default=None, type=dict)

    search_path: Optional[List[SearchRoot]] = None

    def render(self):
        component = resolve_top_level(self.controller, self.component_name, self.search_path)
        return self.present(component, self.render_params or {})

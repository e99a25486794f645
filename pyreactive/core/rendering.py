# rendering.py ----------------------------------------------------
import sys
from contextvars import ContextVar
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from .element import Element, create_element, is_component_class
from .exceptions import RenderError
from .tags import is_builtin_tag

NODE_ONLY_SUFFIX = "_as_node"


# ----------------------------------------------------------------------------
# Identifier resolution
# ----------------------------------------------------------------------------


class BuiltinTag(NamedTuple):
    name: str
    node_only: bool = False


class ComponentClass(NamedTuple):
    cls: type
    node_only: bool = False


class Unresolved(NamedTuple):
    name: Any


Resolution = Union[BuiltinTag, ComponentClass, Unresolved]

# (module name, qualname) -> component class. Lets nested-scope lookup reach
# classes whose qualname cannot be walked from the module (``<locals>``).
_registry: Dict[Tuple[str, str], type] = {}


def register_component(cls: type) -> None:
    _registry[(cls.__module__, cls.__qualname__)] = cls


def _split_name(name: str) -> List[str]:
    return [part for part in name.replace("::", ".").split(".") if part]


def _lookup(module_name: str, parts: List[str]) -> Any:
    found = _registry.get((module_name, ".".join(parts)))
    if found is not None:
        return found
    obj = sys.modules.get(module_name)
    if obj is None:
        return None
    for part in parts:
        obj = getattr(obj, part, None)
        if obj is None:
            return None
    return obj


def enclosing_scopes(scope: type) -> List[List[str]]:
    """Qualname prefixes of ``scope``, innermost first, ending with the module."""
    parts = scope.__qualname__.split(".")
    return [parts[:i] for i in range(len(parts), -1, -1)]


def find_component(name: str, scope: type) -> Optional[type]:
    """Look ``name`` up from ``scope`` outward; first component class wins."""
    name_parts = _split_name(name)
    if not name_parts:
        return None
    for prefix in enclosing_scopes(scope):
        candidate = _lookup(scope.__module__, prefix + name_parts)
        if is_component_class(candidate):
            return candidate
    return None


def resolve(identifier: Any, scope: Optional[type] = None) -> Resolution:
    """Decide what ``identifier`` denotes when used from component class ``scope``.

    Order: component class given by value, built-in tag, nested-scope lookup
    starting at ``scope`` and walking outward. ``<name>_as_node`` resolves
    like ``<name>`` but asks for an element that is not added to the tree.
    """
    if is_component_class(identifier):
        return ComponentClass(identifier)
    if not isinstance(identifier, str):
        return Unresolved(identifier)

    name, node_only = identifier, False
    if name.endswith(NODE_ONLY_SUFFIX):
        name, node_only = name[: -len(NODE_ONLY_SUFFIX)], True

    if is_builtin_tag(name):
        return BuiltinTag(name, node_only)

    if scope is not None:
        found = find_component(name, scope)
        if found is not None:
            return ComponentClass(found, node_only)

    return Unresolved(identifier)


# ----------------------------------------------------------------------------
# Build frames
# ----------------------------------------------------------------------------


class _Frame:
    __slots__ = ("buffer",)

    def __init__(self) -> None:
        self.buffer: List[Any] = []


def _acts_as_string(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class RenderingContext:
    """Stack of build frames turning nested render calls into an element tree."""

    def __init__(self) -> None:
        self._stack: ContextVar = ContextVar(f"render_frames_{id(self)}", default=None)
        self._waiting: ContextVar = ContextVar(f"render_waiting_{id(self)}", default=False)

    # ---------------- frames ----------------
    def _frames(self) -> List[_Frame]:
        frames = self._stack.get()
        if frames is None:
            frames = []
            self._stack.set(frames)
        return frames

    def _top(self) -> Optional[_Frame]:
        frames = self._frames()
        return frames[-1] if frames else None

    @property
    def depth(self) -> int:
        return len(self._frames())

    @property
    def waiting_on_resources(self) -> bool:
        return self._waiting.get()

    @waiting_on_resources.setter
    def waiting_on_resources(self, value: bool) -> None:
        self._waiting.set(bool(value))

    def build(self, block: Callable[[List[Any]], Any]) -> Any:
        """Run ``block(buffer)`` in a fresh frame.

        Returns the block's value, or the last element it emitted when it
        returns ``None``.
        """
        frames = self._frames()
        frame = _Frame()
        frames.append(frame)
        try:
            result = block(frame.buffer)
        finally:
            frames.pop()
        if result is None and frame.buffer:
            result = frame.buffer[-1]
        return result

    def enter(self, element: Element) -> None:
        self._frames().append(_Frame())

    def exit(self, element: Element, failed: bool = False) -> None:
        frame = self._frames().pop()
        if failed:
            return
        element.append_children(frame.buffer)
        element.waiting_on_resources = element.waiting_on_resources or any(
            getattr(child, "waiting_on_resources", False) for child in frame.buffer
        )
        element.finalize()

    # ---------------- rendering ----------------
    def render(self, name: Any, *args: Any, block: Optional[Callable[[], Any]] = None, **props: Any) -> Element:
        """Emit an element for ``name`` (tag, component class or ``None``).

        Positional args are text/element children or a props dict. With a
        ``block`` the elements emitted while it runs become the children;
        ``render(None, block=...)`` is the outer render of a component and
        must produce exactly one element (a bare string is wrapped in a span).
        """
        props, children = self._split_args(args, props)
        self._remove_nodes(props, children)

        if block is not None:
            saved_waiting = self.waiting_on_resources

            def _inner(buffer):
                self.waiting_on_resources = False
                self._run_child_block(name is None, block, buffer)
                if name is not None:
                    element = self._create(name, props, children + list(buffer))
                    element.waiting_on_resources = saved_waiting or any(
                        getattr(e, "waiting_on_resources", False) for e in buffer
                    )
                    return element.finalize()
                last = buffer[-1]
                if isinstance(last, Element):
                    last.waiting_on_resources = last.waiting_on_resources or saved_waiting
                    return last.finalize()
                element = self._create("span", {}, [str(last)])
                element.waiting_on_resources = saved_waiting
                return element.finalize()

            element = self.build(_inner)
        elif isinstance(name, Element):
            element = name
        else:
            element = self._create(name, props, children)
            element.waiting_on_resources = self.waiting_on_resources

        top = self._top()
        if top is not None:
            top.buffer.append(element)
        self.waiting_on_resources = False
        return element

    def render_node(self, name: Any, *args: Any, block=None, **props: Any) -> Element:
        """Like :meth:`render` but the element is not added to the current frame."""
        return self.build(lambda _buffer: self.render(name, *args, block=block, **props)).finalize()

    def _create(self, name: Any, props: Dict[str, Any], children: List[Any]) -> Element:
        element = create_element(name, props, children)
        element._context = self
        return element

    @staticmethod
    def _split_args(args, props) -> Tuple[Dict[str, Any], List[Any]]:
        merged: Dict[str, Any] = {}
        children: List[Any] = []
        for arg in args:
            if isinstance(arg, dict):
                merged.update(arg)
            elif isinstance(arg, Element):
                children.append(arg)
            elif _acts_as_string(arg):
                children.append(str(arg))
            elif arg is not None:
                children.append(arg if isinstance(arg, str) else str(arg))
        merged.update(props)
        return merged, children

    def _remove_nodes(self, props: Dict[str, Any], children: List[Any]) -> None:
        # elements passed as arguments were emitted when they were built
        top = self._top()
        if top is None:
            return
        for value in list(props.values()) + children:
            if isinstance(value, Element):
                for i, item in enumerate(top.buffer):
                    if item is value:
                        del top.buffer[i]
                        break

    @staticmethod
    def _run_child_block(is_outer: bool, block: Callable[[], Any], buffer: List[Any]) -> None:
        result = block()
        if result is None and is_outer and not buffer:
            result = ""
        if _acts_as_string(result):
            result = str(result)
        if isinstance(result, str) or (isinstance(result, Element) and not buffer):
            buffer.append(result)
        if is_outer and len(buffer) != 1:
            raise RenderError(
                f"a component's render must produce exactly one element, got {buffer!r}"
            )


rendering_context = RenderingContext()

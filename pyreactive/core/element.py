# element.py ----------------------------------------------------
from typing import Any, Callable, Iterator, List, Optional

from .console import console
from .exceptions import RenderError

TEXT_NODE = "#text"


def is_component_class(obj: Any) -> bool:
    return isinstance(obj, type) and getattr(obj, "__is_component__", False)


class Element:
    """Node of the tree handed to the rendering engine.

    ``type`` is a tag name, :data:`TEXT_NODE` or a component class. Children
    are elements or plain strings. Once finalized an element is never
    mutated again.
    """

    def __init__(self, type, props=None, children=None, key=None):
        self.type = type
        self.props = dict(props or {})
        self.key = key
        self.waiting_on_resources = False
        self._children: List[Any] = list(children or [])
        self._finalized = False
        self._context = None  # set by the rendering context that built it

    @classmethod
    def text(cls, value: Any) -> "Element":
        return cls(TEXT_NODE, {"value": "" if value is None else str(value)}).finalize()

    @property
    def children(self) -> tuple:
        return tuple(self._children)

    @property
    def is_component(self) -> bool:
        return is_component_class(self.type)

    @property
    def is_text(self) -> bool:
        return self.type == TEXT_NODE

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def name(self) -> str:
        if self.is_component:
            return self.type.__name__
        return str(self.type)

    def append_children(self, items) -> None:
        if self._finalized:
            raise RenderError(f"element <{self.name}> is already finalized")
        self._children.extend(items)

    def finalize(self) -> "Element":
        if not self._finalized:
            for child in self._children:
                if isinstance(child, Element):
                    child.finalize()
            self._finalized = True
        return self

    def to_n(self) -> "Element":
        return self

    # ``with self.div(): ...`` collects the block's elements as children
    def __enter__(self) -> "Element":
        if self._context is None:
            raise RenderError(f"element <{self.name}> was not built by a rendering context")
        self._context.enter(self)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._context.exit(self, failed=exc_type is not None)
        return False

    def __repr__(self) -> str:
        key = f" key={self.key!r}" if self.key is not None else ""
        return f"<Element {self.name}{key} props={self.props!r} children={len(self._children)}>"


def create_element(type, props=None, children=None, key=None) -> Element:
    """Build an element; component elements get default props and prop validation."""
    props = dict(props or {})
    prop_key = props.pop("key", None)
    if key is None:
        key = prop_key

    if is_component_class(type):
        for name, default in type.default_props().items():
            props.setdefault(name, default)
        check_prop_types(type, props)

    return Element(type, props, children, key)


def check_prop_types(component_class, props) -> List[str]:
    warnings = []
    for prop_name, checker in component_class.prop_types().items():
        error = checker(props, prop_name, component_class.__name__)
        if error:
            message = f"Warning: Failed propType: {error}"
            console.warn(message)
            warnings.append(message)
    return warnings


def _wrap(item: Any) -> Element:
    return item if isinstance(item, Element) else Element.text(item)


def _flatten(raw: Any) -> List[Any]:
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        out: List[Any] = []
        for item in raw:
            out.extend(_flatten(item))
        return out
    return [raw]


class Children:
    """View over a component's native children.

    Every call re-reads the native collection, so a view can be iterated
    again only by asking for it again::

        self.children.each(lambda child: ...)   # push style, returns None
        for child in self.children: ...          # pull style, lazy
    """

    def __init__(self, source: Callable[[], Any]):
        self._source = source

    def _read(self) -> List[Any]:
        return _flatten(self._source())

    def each(self, fn: Optional[Callable[[Element], Any]] = None):
        if fn is None:
            return iter(self)
        for item in self._read():
            fn(_wrap(item))
        return None

    def __iter__(self) -> Iterator[Element]:
        for item in self._read():
            yield _wrap(item)

    def __len__(self) -> int:
        return len(self._read())

    def to_n(self) -> List[Any]:
        return self._read()

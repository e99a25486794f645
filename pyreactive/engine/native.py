# native.py ----------------------------------------------------
from typing import Any, Callable, Dict, List, Optional, Tuple


class TextNode:
    name = "#text"

    def __init__(self, value: Any):
        self.value = "" if value is None else str(value)
        self.props: Dict[str, Any] = {}
        self.children: List[Any] = []
        self.key = None


class HostNode:
    """Mounted built-in tag."""

    def __init__(self, tag: str, props: Dict[str, Any], key=None):
        self.name = tag
        self.tag = tag
        self.props = props
        self.key = key
        self.children: List[Any] = []


class NativeComponent:
    """Engine-side instance behind one component wrapper.

    The wrapper only talks to it through ``props``, ``state``, ``refs`` and
    the methods below; state and prop changes are queued on the engine and
    applied on its next render pass.
    """

    def __init__(self, engine, component_class, props: Dict[str, Any], key=None):
        self._engine = engine
        self.component_class = component_class
        self.name = component_class.__name__
        self.key = key
        self.props: Dict[str, Any] = props
        self.state: Optional[Dict[str, Any]] = None
        self.refs: Dict[str, Any] = {}
        self.instance = None
        self.rendered = None

        self.mounting = False
        self.mounted = False
        self.unmounted = False
        self.pending_state: List[Tuple[Dict[str, Any], bool]] = []
        self.pending_props: Optional[Dict[str, Any]] = None
        self.force = False
        self.callbacks: List[Callable[[], Any]] = []

        for mixin in getattr(component_class, "_native_mixins", ()):
            for attr, fn in mixin.items():
                setattr(self, attr, fn.__get__(self))

    @property
    def children(self) -> List[Any]:
        return [] if self.rendered is None else [self.rendered]

    # ---------------- contract used by the component wrapper ----------------
    def set_state(self, partial: Dict[str, Any], callback: Optional[Callable] = None) -> None:
        self._engine.enqueue_state(self, partial, replace=False, callback=callback)

    def replace_state(self, state: Dict[str, Any], callback: Optional[Callable] = None) -> None:
        self._engine.enqueue_state(self, state, replace=True, callback=callback)

    def set_props(self, partial: Dict[str, Any], callback: Optional[Callable] = None) -> None:
        self._engine.enqueue_props(self, partial, replace=False, callback=callback)

    def replace_props(self, props: Dict[str, Any], callback: Optional[Callable] = None) -> None:
        self._engine.enqueue_props(self, props, replace=True, callback=callback)

    def force_update(self) -> None:
        self.force = True
        self._engine.schedule(self, "force_update")

    def is_mounted(self) -> bool:
        return self.mounted

    def find_dom_node(self):
        node = self.rendered
        while isinstance(node, NativeComponent):
            node = node.rendered
        return node

    def take_pending_state(self) -> Optional[Dict[str, Any]]:
        state = self.state
        for partial, replace in self.pending_state:
            state = dict(partial) if replace else {**(state or {}), **partial}
        self.pending_state = []
        return state

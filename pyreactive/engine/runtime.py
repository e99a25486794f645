# runtime.py -------------------------------------------------
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Set

from pyreactive.config import get_settings
from pyreactive.core.console import console
from pyreactive.core.debug import enable_tracing, record_schedule, rendering, update_pass
from pyreactive.core.element import Element
from pyreactive.core.state import STATE_UPDATED_AT, store

from .native import HostNode, NativeComponent, TextNode


def _component_props(element: Element) -> Dict[str, Any]:
    props = dict(element.props)
    if element.children:
        props["children"] = list(element.children)
    return props


def _names(keys) -> str:
    return ", ".join(sorted(str(k) for k in keys))


def _key_of(node: Any, idx: int) -> str:
    key = getattr(node, "key", None)
    return key if key is not None else f"__idx_{idx}"


class Engine:
    """In-process rendering engine driving components through their lifecycle.

    Usage:
        engine = Engine()
        root = engine.mount(create_element(App, {"title": "hi"}))
        ...                  # components call set_state / force_update
        engine.run_renders() # apply queued updates
        engine.unmount()

    With ``static=True`` only will-mount and render run, as for server-side
    markup; ``did_mount`` and queued updates are skipped.
    """

    def __init__(self, *, static: bool = False, trace: Optional[bool] = None):
        self.static = static
        self.root: Any = None
        self._queue: Deque[NativeComponent] = deque()
        self._enqueued: Set[NativeComponent] = set()
        if trace is None:
            trace = get_settings().trace
        if trace:
            enable_tracing()

    # -------------------------------
    # Public API
    # -------------------------------
    def mount(self, element: Any):
        self.root = self._mount(element)
        if not self.static:
            self.run_renders()
        return self.root

    def unmount(self) -> None:
        root, self.root = self.root, None
        if root is not None:
            self._unmount(root)

    def release(self) -> None:
        """Drop store entries of a static tree without running unmount hooks."""

        def _walk(node):
            if isinstance(node, NativeComponent):
                if node.instance is not None:
                    store.remove(node.instance)
                node.mounted, node.unmounted = False, True
            for child in getattr(node, "children", ()):
                _walk(child)

        if self.root is not None:
            _walk(self.root)
        self.root = None

    def schedule(self, native: NativeComponent, cause: str, detail: Optional[str] = None) -> None:
        if native.unmounted:
            return
        record_schedule(native, cause, detail)
        if native.mounting or self.static:
            return
        if native in self._enqueued:
            return
        self._enqueued.add(native)
        self._queue.append(native)

    def run_renders(self) -> int:
        """Drain the update queue; returns how many components were processed."""
        processed = 0
        while self._queue:
            native = self._queue.popleft()
            self._enqueued.discard(native)
            if not native.mounted:
                continue
            with update_pass(native):
                next_props = native.pending_props
                native.pending_props = None
                self._update_component(native, native.props if next_props is None else next_props)
            processed += 1
        return processed

    def call_static(self, component_class, name: str, *args: Any) -> Any:
        return component_class._static_call_backs[name](*args)

    # -------------------------------
    # Native handle requests
    # -------------------------------
    def enqueue_state(self, native: NativeComponent, state: Dict[str, Any], *, replace: bool, callback: Optional[Callable]) -> None:
        if native.mounting:
            # applied before the first render
            native.state = dict(state) if replace else {**(native.state or {}), **state}
            if callback is not None:
                native.callbacks.append(callback)
            return
        if native.unmounted:
            return
        # a parent is not `mounted` until its children finish mounting
        native.pending_state.append((dict(state), replace))
        if callback is not None:
            native.callbacks.append(callback)
        self.schedule(native, "set_state", _names(k for k in state if k != STATE_UPDATED_AT))

    def enqueue_props(self, native: NativeComponent, props: Dict[str, Any], *, replace: bool, callback: Optional[Callable]) -> None:
        if native.unmounted:
            return
        base = native.pending_props if native.pending_props is not None else native.props
        native.pending_props = dict(props) if replace else {**base, **props}
        if callback is not None:
            native.callbacks.append(callback)
        self.schedule(native, "set_props", _names(props))

    # -------------------------------
    # Internal: mount / update / unmount
    # -------------------------------
    def _mount(self, node: Any):
        if node is None:
            return None
        if not isinstance(node, Element):
            return TextNode(node)
        if node.is_text:
            return TextNode(node.props.get("value"))
        if node.is_component:
            return self._mount_component(node)

        host = HostNode(node.type, dict(node.props), node.key)
        host.children = [self._mount(child) for child in node.children]
        return host

    def _mount_component(self, element: Element) -> NativeComponent:
        native = NativeComponent(self, element.type, _component_props(element), element.key)
        native.instance = element.type(native)

        with rendering(native, "mount"):
            native.mounting = True
            try:
                native.instance.component_will_mount()
                tree = native.instance._render_wrapper()
            finally:
                native.mounting = False
            native.rendered = self._mount(tree)
        native.mounted = True
        if not self.static:
            native.instance.component_did_mount()
            self._flush_callbacks(native)
        return native

    def _update_component(self, native: NativeComponent, next_props: Dict[str, Any]) -> None:
        instance = native.instance
        if next_props is not native.props:
            instance.component_will_receive_props(next_props)

        next_state = native.take_pending_state()
        force, native.force = native.force, False

        if not force and not instance.should_component_update(next_props, next_state):
            native.props, native.state = next_props, next_state
            self._flush_callbacks(native)
            return

        prev_props, prev_state = native.props, native.state
        instance.component_will_update(next_props, next_state)
        native.props, native.state = next_props, next_state

        with rendering(native, "update"):
            tree = native.instance._render_wrapper()
            native.rendered = self._reconcile(native.rendered, tree)

        instance.component_did_update(prev_props, prev_state)
        self._flush_callbacks(native)

    def _same_kind(self, mounted: Any, element: Any) -> bool:
        if isinstance(mounted, TextNode):
            return not isinstance(element, Element) or element.is_text
        if not isinstance(element, Element) or element.is_text:
            return False
        if mounted.key != element.key:
            return False
        if isinstance(mounted, NativeComponent):
            return mounted.component_class is element.type
        return mounted.tag == element.type

    def _reconcile(self, mounted: Any, element: Any):
        if element is None:
            if mounted is not None:
                self._unmount(mounted)
            return None
        if mounted is None:
            return self._mount(element)
        if not self._same_kind(mounted, element):
            self._unmount(mounted)
            return self._mount(element)

        if isinstance(mounted, TextNode):
            value = element.props.get("value") if isinstance(element, Element) else element
            mounted.value = "" if value is None else str(value)
        elif isinstance(mounted, NativeComponent):
            self._update_component(mounted, _component_props(element))
        else:
            mounted.props = dict(element.props)
            mounted.children = self._reconcile_children(mounted, mounted.children, element.children)
        return mounted

    def _reconcile_children(self, parent: Any, old: List[Any], new: tuple) -> List[Any]:
        # 1. index old children by key (position when no key was given)
        old_by_key: Dict[str, Any] = {}
        shadowed: List[Any] = []
        for idx, child in enumerate(old):
            key = _key_of(child, idx)
            if key in old_by_key:
                console.warn(f"Warning: duplicate key {key!r} among children of <{parent.name}>")
                shadowed.append(old_by_key[key])
            old_by_key[key] = child

        # 2. reuse or create a node for every new child
        result = []
        for idx, element in enumerate(new):
            matched = old_by_key.pop(_key_of(element, idx), None)
            result.append(self._reconcile(matched, element))

        # 3. unmount orphans
        for orphan in shadowed + list(old_by_key.values()):
            self._unmount(orphan)
        return result

    def _unmount(self, node: Any) -> None:
        if isinstance(node, NativeComponent):
            try:
                if node.mounted and node.instance is not None:
                    node.instance.component_will_unmount()
            finally:
                node.mounted, node.unmounted = False, True
                self._enqueued.discard(node)
                if node.rendered is not None:
                    self._unmount(node.rendered)
            return
        for child in getattr(node, "children", ()):
            self._unmount(child)

    def _flush_callbacks(self, native: NativeComponent) -> None:
        callbacks, native.callbacks = native.callbacks, []
        for cb in callbacks:
            cb()

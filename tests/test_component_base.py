from __future__ import annotations

import pytest

from pyreactive import Component, ExportedState, Param, State, before_mount, create_element
from pyreactive.core import current
from pyreactive.core.console import console
from pyreactive.core.exceptions import NoNativeComponent
from pyreactive.engine import Engine, render_mounted


class Base(Component):
    order = []
    size = Param(1, type=int)

    @before_mount
    def base_hook(self):
        self.order.append("base")


class Child(Base):
    label = Param("x")

    @before_mount
    def child_hook(self):
        self.order.append("child")

    def render(self):
        self.div(f"{self.label}:{self.size}")


class Declared(Component):
    def render(self):
        self.div(f"{self.name}/{self.count}")


Declared.required_param("name", type=str)
Declared.define_state(count=7)


class Theme(Component):
    color = ExportedState("blue")

    def render(self):
        self.span(self.color)


class Shared(Component):
    def render(self):
        self.span(self.total)


Shared.export_state(total=0)


class Emitter(Component):
    def render(self):
        self.button("fire")


class Tracked(Component):
    seen = []
    value = State(0, on_change=lambda name, old, new: Tracked.seen.append((name, old, new)))

    def render(self):
        self.span(self.value)


class Presenter(Component):
    target = Param("Child")

    def render(self):
        self.present(self.target, label="via present")


def test_parent_hooks_run_before_child_hooks() -> None:
    Base.order = []
    Engine(static=True).mount(create_element(Child))
    assert Base.order == ["base", "child"]


def test_subclass_declarations_do_not_leak_into_parent() -> None:
    assert "label" in Child._validator
    assert "size" in Child._validator
    assert "label" not in Base._validator
    assert Base.default_props() == {"size": 1}
    assert Child.default_props() == {"size": 1, "label": "x"}


def test_classmethod_declarations(engine) -> None:
    root = engine.mount(create_element(Declared, {"name": "n"}))
    assert render_mounted(root) == "<div>n/7</div>"
    assert Declared.initial_state() == {"count": 7}

    create_element(Declared, {})
    assert console.entries("warn") == [
        "Warning: Failed propType: In component `Declared`\nRequired prop `name` was not specified"
    ]


def test_declaring_on_the_base_class_is_rejected() -> None:
    with pytest.raises(TypeError):
        Component.required_param("nope")


def test_exported_state_is_shared_by_instances() -> None:
    first, second = Engine(), Engine()
    a = first.mount(create_element(Theme))
    b = second.mount(create_element(Theme))

    assert Theme.bang.color("red") == "blue"
    first.run_renders()
    second.run_renders()

    assert render_mounted(a) == "<span>red</span>"
    assert render_mounted(b) == "<span>red</span>"
    assert "Theme.color" in a.state
    assert a.instance.color == "red"


def test_export_state_classmethod(engine) -> None:
    root = engine.mount(create_element(Shared))
    assert render_mounted(root) == "<span>0</span>"

    root.instance.total = 3
    engine.run_renders()
    assert render_mounted(root) == "<span>3</span>"


def test_state_on_change_sees_old_and_new(engine) -> None:
    Tracked.seen = []
    root = engine.mount(create_element(Tracked))
    root.instance.value = 2
    assert Tracked.seen == [("value", 0, 2)]


def test_emit_calls_the_camelized_handler(engine) -> None:
    got = []
    root = engine.mount(create_element(Emitter, {"_onValueChanged": lambda *a: got.append(a) or "ok"}))
    inst = root.instance

    assert inst.emit("value_changed", 1, 2) == "ok"
    assert got == [(1, 2)]
    assert inst.emit("missing") is None


def test_native_mixin_and_static_call_back(engine) -> None:
    class Mixed(Component):
        def render(self):
            self.div("m")

    Mixed.native_mixin({"shout": lambda native, text: f"{native.name}: {text.upper()}"})
    Mixed.static_call_back("answer", lambda: 42)

    root = engine.mount(create_element(Mixed))
    assert root.shout("hi") == "Mixed: HI"
    assert engine.call_static(Mixed, "answer") == 42


def test_dom_node_and_refs(engine) -> None:
    root = engine.mount(create_element(Child))
    inst = root.instance
    assert inst.dom_node().tag == "div"
    assert inst.refs == {}
    assert inst.mounted()


def test_present_resolves_names_from_the_component(engine) -> None:
    root = engine.mount(create_element(Presenter))
    assert render_mounted(root) == "<div>via present:1</div>"


def test_no_native_handle_fails_fast() -> None:
    detached = Child(None)
    with pytest.raises(NoNativeComponent, match="Child"):
        detached.state
    with pytest.raises(NoNativeComponent):
        detached.set_state({"a": 1})
    assert not detached.mounted()


def test_console_subscribers_receive_entries() -> None:
    got = []
    cb = lambda level, text: got.append((level, text))
    console.subscribe(cb)
    try:
        console.warn("careful")
        console.log("hello")
    finally:
        console.unsubscribe(cb)
    console.error("after")

    assert got == [("warn", "careful"), ("log", "hello")]
    assert console.entries() == ["careful", "hello", "after"]
    assert console.dump() == "careful\nhello\nafter"


class Inspector(Component):
    label = Param("seen")
    found = []

    @before_mount
    def look(self):
        self.found.append((bool(current), current.label))

    def render(self):
        self.div(self.label)


def test_current_resolves_the_running_component(engine) -> None:
    del Inspector.found[:]
    engine.mount(create_element(Inspector))
    assert Inspector.found == [(True, "seen")]

    assert not current
    with pytest.raises(RuntimeError, match="current.label"):
        current.label


def test_watch_reports_writes_to_the_callback(engine) -> None:
    root = engine.mount(create_element(Inspector))
    seen = []
    watched = root.instance.watch(1, seen.append)

    assert watched() == 1
    assert watched(2) == 1
    assert watched() == 2
    assert seen == [2]

from __future__ import annotations

import pytest

from pyreactive import (
    Component,
    Param,
    State,
    after_mount,
    after_update,
    before_mount,
    before_receive_props,
    before_unmount,
    before_update,
    create_element,
)
from pyreactive.core.console import console
from pyreactive.core.exceptions import NoNativeComponent
from pyreactive.core.state import STATE_UPDATED_AT, store
from pyreactive.engine import Engine, render_mounted, render_to_static_markup


class Plain(Component):
    foo = Param("bar")

    def render(self):
        self.div(self.foo)


class AlwaysUpdate(Component):
    foo = Param("bar")

    def needs_update(self, next_params, next_state):
        return True

    def render(self):
        self.div(self.foo)


class NeverUpdate(AlwaysUpdate):
    def needs_update(self, next_params, next_state):
        return False


class Counter(Component):
    count = State(0)

    def render(self):
        self.span(f"count {self.count}")


class Preloaded(Component):
    count = State(0)

    @before_mount
    def load(self):
        self.count = 3

    def render(self):
        self.span(self.count)


calls = []


class Tracked(Component):
    label = Param("a")

    @before_mount
    def _before_mount(self):
        calls.append("before_mount")

    @after_mount
    def _after_mount(self):
        calls.append("after_mount")

    @before_receive_props
    def _before_receive_props(self, next_params):
        calls.append(("before_receive_props", next_params["label"]))

    @before_update
    def _before_update(self, next_params, next_state):
        calls.append("before_update")

    @after_update
    def _after_update(self, prev_params, prev_state):
        calls.append(("after_update", prev_params["label"]))

    @before_unmount
    def _before_unmount(self):
        calls.append("before_unmount")

    def render(self):
        self.p(self.label)


class Broken(Component):
    show_backtrace = False

    def render(self):
        raise ValueError("boom")


class BrokenWithTrace(Broken):
    show_backtrace = True


class BrokenHook(Component):
    reached = []

    @before_mount
    def fails(self):
        raise RuntimeError("hook failed")

    @before_mount
    def skipped(self):
        BrokenHook.reached.append("skipped")

    def render(self):
        self.div("still here")


@pytest.fixture
def plain(engine):
    return engine.mount(create_element(Plain, {"foo": "bar"})).instance


def test_identical_params_without_state_skip_update(plain) -> None:
    assert plain.should_component_update({"foo": "bar"}, None) is False


def test_changed_param_value_requires_update(plain) -> None:
    assert plain.should_component_update({"foo": "baz"}, None) is True


def test_changed_param_names_require_update(plain) -> None:
    assert plain.should_component_update({"foo": "bar", "extra": 1}, None) is True


def test_state_appearing_requires_update(plain) -> None:
    assert plain.should_component_update({"foo": "bar"}, {STATE_UPDATED_AT: 1}) is True


def test_timestamp_decides_between_equal_params(engine) -> None:
    root = engine.mount(create_element(Counter))
    inst = root.instance
    root.state = {"count": 0, STATE_UPDATED_AT: 1.0}

    assert inst.should_component_update(root.props, {"count": 0, STATE_UPDATED_AT: 2.0}) is True
    assert inst.should_component_update(root.props, {"count": 0, STATE_UPDATED_AT: 1.0}) is False


def test_state_without_timestamp_is_not_an_update(engine) -> None:
    # neither bag carries the hidden timestamp, so visible changes go unnoticed
    root = engine.mount(create_element(Counter))
    root.state = {"count": 0}
    assert root.instance.should_component_update(root.props, {"count": 1}) is False


def test_needs_update_override_is_authoritative(engine) -> None:
    always = engine.mount(create_element(AlwaysUpdate, {"foo": "bar"})).instance
    assert always.should_component_update({"foo": "bar"}, None) is True

    never = Engine().mount(create_element(NeverUpdate, {"foo": "bar"})).instance
    assert never.should_component_update({"foo": "other"}, {STATE_UPDATED_AT: 5}) is False


def test_state_write_rerenders(engine) -> None:
    root = engine.mount(create_element(Counter))
    assert render_mounted(root) == "<span>count 0</span>"

    root.instance.count = 5
    assert render_mounted(root) == "<span>count 0</span>"
    assert engine.run_renders() == 1

    assert render_mounted(root) == "<span>count 5</span>"
    assert root.state["count"] == 5
    assert STATE_UPDATED_AT in root.state


def test_bang_state_accessor(engine) -> None:
    root = engine.mount(create_element(Counter))
    inst = root.instance

    obs = inst.bang.count()
    assert obs() == 0
    assert obs(4) == 0
    assert inst.bang.count(9) == 4
    engine.run_renders()
    assert render_mounted(root) == "<span>count 9</span>"


def test_state_set_in_before_mount_is_rendered(engine) -> None:
    root = engine.mount(create_element(Preloaded))
    assert render_mounted(root) == "<span>3</span>"
    assert engine.run_renders() == 0


def test_hooks_run_in_lifecycle_order(engine) -> None:
    del calls[:]
    root = engine.mount(create_element(Tracked, {"label": "a"}))
    root.instance.set_props({"label": "b"})
    engine.run_renders()
    engine.unmount()

    assert calls == [
        "before_mount",
        "after_mount",
        ("before_receive_props", "b"),
        "before_update",
        ("after_update", "a"),
        "before_unmount",
    ]


def test_unmount_releases_state_and_native_handle(engine) -> None:
    root = engine.mount(create_element(Counter))
    inst = root.instance
    assert store.has(inst, "count")

    engine.unmount()

    assert not store.has(inst, "count")
    assert not inst.mounted()
    with pytest.raises(NoNativeComponent):
        inst.count
    with pytest.raises(NoNativeComponent):
        inst.params


def test_render_exception_is_reported_without_backtrace() -> None:
    assert render_to_static_markup(create_element(Broken)) == ""
    assert console.entries("error") == ["Exception raised while rendering <Broken>: boom"]


def test_render_exception_is_reported_with_backtrace() -> None:
    render_to_static_markup(create_element(BrokenWithTrace))
    [message] = console.entries("error")
    lines = message.split("\n")
    assert lines[0] == "Exception raised while rendering <BrokenWithTrace>"
    assert "Traceback" in lines[1]
    assert lines[-1] == "ValueError: boom"


def test_backtrace_default_comes_from_settings(monkeypatch) -> None:
    from pyreactive.config import reset_settings

    class Quiet(Component):
        def render(self):
            raise KeyError("k")

    monkeypatch.setenv("PYREACTIVE_BACKTRACE", "off")
    reset_settings()
    render_to_static_markup(create_element(Quiet))
    assert console.entries("error") == ["Exception raised while rendering <Quiet>: 'k'"]


def test_reraise_propagates_render_errors() -> None:
    class Loud(Broken):
        reraise_exceptions = True

    with pytest.raises(ValueError, match="boom"):
        Engine().mount(create_element(Loud))


def test_failing_hook_stops_its_chain_but_not_the_render() -> None:
    BrokenHook.reached = []
    html = render_to_static_markup(create_element(BrokenHook))

    assert html == "<div>still here</div>"
    assert BrokenHook.reached == []
    [message] = console.entries("error")
    assert message.startswith("Exception raised while rendering <BrokenHook>")
    assert "RuntimeError: hook failed" in message


def test_hook_outcome_reports_errors() -> None:
    outcome = BrokenHook(None).run_callback("before_mount")
    assert not outcome.ok
    assert outcome.ran == 0
    assert isinstance(outcome.errors[0], RuntimeError)


def test_force_update_rerenders_without_changes(engine) -> None:
    del calls[:]
    root = engine.mount(create_element(Tracked, {"label": "a"}))
    root.instance.force_update()
    engine.run_renders()
    assert "before_update" in calls


def test_set_state_callback_runs_after_update(engine) -> None:
    seen = []
    root = engine.mount(create_element(Plain))
    root.instance.set_state({"x": 1}, callback=lambda: seen.append(render_mounted(root)))
    engine.run_renders()
    assert seen == ["<div>bar</div>"]
    assert root.state == {"x": 1}

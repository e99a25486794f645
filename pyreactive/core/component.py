# component.py ----------------------------------------------------
import traceback
from typing import Any, Callable, Dict, Mapping, Optional

from ..config import get_settings
from .callbacks import Callbacks, HookOutcome
from .console import console
from .element import Children
from .exceptions import NoNativeComponent
from .observable import Observable
from .params import BangAccessor, ExportedState, OtherParams, Param, Params, State
from .rendering import BuiltinTag, Unresolved, register_component, rendering_context, resolve
from .state import STATE_UPDATED_AT, store
from .validator import Validator, is_observable_type


def _event_camelize(event_name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in str(event_name).split("_"))


def _owner_name(owner) -> str:
    cls = owner if isinstance(owner, type) else type(owner)
    return cls.__name__


class Component(Callbacks):
    """Base class for class-based components.

    Subclasses declare params and state as class attributes and implement
    ``render``::

        class Greeting(Component):
            name = Param(type=str)
            clicks = State(0)

            @before_mount
            def load(self):
                self.clicks = 1

            def render(self):
                with self.div(class_="greeting"):
                    self.span(f"hello {self.name}")

    The rendering engine drives the instance through the ``component_*``
    methods; everything else is the authoring surface.
    """

    __is_component__ = True

    # None means "use the value from Settings"
    show_backtrace: Optional[bool] = None
    reraise_exceptions: Optional[bool] = None

    _validator: Validator = Validator()
    _state_fields: Dict[str, State] = {}
    _two_way_params: tuple = ()
    _native_mixins: tuple = ()
    _static_call_backs: Dict[str, Callable] = {}

    bang = BangAccessor()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._validator = cls._validator.copy()
        cls._state_fields = dict(cls._state_fields)
        cls._static_call_backs = dict(cls._static_call_backs)
        for name, attr in list(cls.__dict__.items()):
            cls._declare(name, attr)
        register_component(cls)

    @classmethod
    def _declare(cls, name: str, attr: Any) -> None:
        if isinstance(attr, Param):
            decl = attr.declare(cls._validator)
            if is_observable_type(decl.type):
                cls._two_way_params = cls._two_way_params + (name,)
        elif isinstance(attr, OtherParams):
            attr.declare(cls._validator)
        elif isinstance(attr, State):
            cls._state_fields[name] = attr

    # ---------------- class-level declarations ----------------
    @classmethod
    def _add_declaration(cls, name: str, attr: Any) -> Any:
        if cls is Component:
            raise TypeError("declare params and state on a Component subclass")
        setattr(cls, name, attr)
        attr.__set_name__(cls, name)
        cls._declare(name, attr)
        return attr

    @classmethod
    def required_param(cls, name: str, **options) -> Param:
        return cls._add_declaration(name, Param(**options))

    @classmethod
    def optional_param(cls, name: str, default: Any = None, **options) -> Param:
        return cls._add_declaration(name, Param(default, **options))

    @classmethod
    def collect_other_params_as(cls, name: str) -> OtherParams:
        return cls._add_declaration(name, OtherParams())

    @classmethod
    def define_state(cls, *names: str, **states: Any) -> None:
        for name in names:
            states.setdefault(name, None)
        for name, default in states.items():
            cls._add_declaration(name, State(default))

    @classmethod
    def export_state(cls, *names: str, **states: Any) -> None:
        for name in names:
            states.setdefault(name, None)
        for name, default in states.items():
            field = cls._add_declaration(name, ExportedState(default))
            store.initialize_states(cls, {name: field.initial_value()})

    @classmethod
    def initial_state(cls) -> Dict[str, Any]:
        return {
            name: field.initial_value()
            for name, field in cls._state_fields.items()
            if not field.exported
        }

    @classmethod
    def native_mixin(cls, item: Mapping[str, Callable]) -> None:
        cls._native_mixins = cls._native_mixins + (item,)

    @classmethod
    def static_call_back(cls, name: str, fn: Callable) -> None:
        cls._static_call_backs = {**cls._static_call_backs, name: fn}

    # ---------------- validation ----------------
    @classmethod
    def default_props(cls) -> Dict[str, Any]:
        return cls._validator.default_props()

    @classmethod
    def prop_types(cls) -> Dict[str, Callable]:
        if not cls._validator:
            return {}

        def _component_validator(props, prop_name, component_name):
            errors = cls._validator.validate(props)
            if not errors:
                return None
            return "In component `" + component_name + "`\n" + "\n".join(errors)

        return {"_componentValidator": _component_validator}

    # ---------------- error reporting ----------------
    @classmethod
    def process_exception(cls, error: BaseException, component, reraise: Optional[bool] = None) -> str:
        settings = get_settings()
        show_backtrace = settings.backtrace if cls.show_backtrace is None else cls.show_backtrace
        if reraise is None:
            reraise = settings.reraise if cls.reraise_exceptions is None else cls.reraise_exceptions

        lines = [f"Exception raised while rendering {component!r}"]
        if show_backtrace:
            lines += [
                line.rstrip("\n")
                for line in traceback.format_exception(type(error), error, error.__traceback__)
            ]
        else:
            lines[0] += f": {error}"
        message = "\n".join(lines)
        console.error(message)
        if reraise:
            raise error
        return message

    # ---------------- instance ----------------
    def __init__(self, native):
        self._native = native
        self._processed_params: Dict[str, Any] = {}
        self.waiting_on_resources = False

    def _require_native(self, action: str = "access"):
        if self._native is None:
            raise NoNativeComponent(self, action)
        return self._native

    @property
    def native(self):
        return self._require_native()

    @property
    def params(self) -> Params:
        return Params(self._require_native("params").props, self)

    @property
    def state(self) -> Dict[str, Any]:
        return dict(self._require_native("state").state or {})

    @property
    def refs(self) -> Dict[str, Any]:
        return dict(self._require_native("refs").refs)

    @property
    def children(self) -> Children:
        native = self._require_native("children")
        return Children(lambda: native.props.get("children"))

    def render(self):
        raise NotImplementedError(f"{type(self).__name__} has no render defined")

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    # ---------------- engine API ----------------
    def dom_node(self):
        return self._require_native("dom_node").find_dom_node()

    def mounted(self) -> bool:
        return self._native is not None and self._native.is_mounted()

    def force_update(self) -> None:
        self._require_native("force_update").force_update()

    def set_state(self, state: Mapping[str, Any], callback: Optional[Callable] = None) -> None:
        self._require_native("set_state").set_state(dict(state), callback)

    def set_state_replace(self, state: Mapping[str, Any], callback: Optional[Callable] = None) -> None:
        self._require_native("set_state").replace_state(dict(state), callback)

    def set_props(self, props: Mapping[str, Any], callback: Optional[Callable] = None) -> None:
        self._require_native("set_props").set_props(dict(props), callback)

    def set_props_replace(self, props: Mapping[str, Any], callback: Optional[Callable] = None) -> None:
        self._require_native("set_props").replace_props(dict(props), callback)

    def update_native_state(self, owner, name: str, value: Any) -> None:
        """Push a state write into the native state bag so the engine re-renders."""
        if self._native is None:
            return
        key = name if owner is None or owner is self else f"{_owner_name(owner)}.{name}"
        self._native.set_state({STATE_UPDATED_AT: store.stamp(), key: value})

    def emit(self, event_name: str, *args: Any) -> Any:
        handler = self.params.get(f"_on{_event_camelize(event_name)}")
        if handler is None:
            return None
        return handler(*args)

    def watch(self, value: Any, on_change: Callable[[Any], Any]):
        return Observable(value, on_change)

    # ---------------- rendering DSL ----------------
    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        native = self.__dict__.get("_native")
        if native is not None and name in native.props:
            return native.props[name]

        resolution = resolve(name, type(self))
        if isinstance(resolution, Unresolved):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

        target = resolution.name if isinstance(resolution, BuiltinTag) else resolution.cls
        render = rendering_context.render_node if resolution.node_only else rendering_context.render

        def _render(*args, block=None, **props):
            return render(target, *args, block=block, **props)

        _render.__name__ = name
        return _render

    def present(self, name_or_class, *args, block=None, **props):
        """Render a component given by value (or a name resolved from this class)."""
        resolution = resolve(name_or_class, type(self))
        if isinstance(resolution, Unresolved):
            raise AttributeError(f"cannot resolve {name_or_class!r} from {type(self).__name__}")
        target = resolution.name if isinstance(resolution, BuiltinTag) else resolution.cls
        return rendering_context.render(target, *args, block=block, **props)

    def _render_wrapper(self):
        try:
            with store.with_context(self):
                element = rendering_context.render(None, block=self.render)
                self.waiting_on_resources = element.waiting_on_resources
                return element
        except Exception as e:
            type(self).process_exception(e, self)
            return None

    # ---------------- lifecycle adapter ----------------
    def _report(self, outcome: HookOutcome) -> HookOutcome:
        for error in outcome.errors:
            type(self).process_exception(error, self)
        return outcome

    def _run_hooks(self, hook_name: str, *args, then: Optional[Callable[[], Any]] = None) -> HookOutcome:
        with store.with_context(self):
            outcome = self.run_callback(hook_name, *args)
            if then is not None:
                try:
                    then()
                except Exception as e:
                    outcome.fail(e)
        return self._report(outcome)

    def component_will_mount(self) -> HookOutcome:
        self._processed_params = {}
        try:
            initial = type(self).initial_state()
            if initial:
                self.set_state_replace(initial)
            store.initialize_states(self, initial)
        except Exception as e:
            return self._report(HookOutcome("before_mount").fail(e))
        return self._run_hooks("before_mount")

    def component_did_mount(self) -> HookOutcome:
        return self._run_hooks("after_mount", then=store.update_states_to_observe)

    def component_will_receive_props(self, next_props: Mapping[str, Any]) -> HookOutcome:
        outcome = self._run_hooks("before_receive_props", Params(next_props))
        self._processed_params = {}
        return outcome

    def props_changed(self, next_props: Mapping[str, Any]) -> bool:
        current = self.params
        if sorted(current.keys()) != sorted(next_props.keys()):
            return True
        return any(next_props[k] != v for k, v in current.items())

    def should_component_update(self, next_props: Mapping[str, Any], next_state: Optional[Mapping[str, Any]]) -> bool:
        with store.with_context(self):
            next_params = Params(next_props)
            needs_update = getattr(type(self), "needs_update", None)
            if callable(needs_update):
                return bool(self.needs_update(next_params, None if next_state is None else dict(next_state)))
            if self.props_changed(next_params):
                return True
            current_state = self._require_native("state").state
            if (next_state is None) != (current_state is None):
                return True
            if next_state is None and current_state is None:
                return False
            if next_state.get(STATE_UPDATED_AT) != current_state.get(STATE_UPDATED_AT):
                return True
            return False

    def component_will_update(self, next_props, next_state) -> HookOutcome:
        return self._run_hooks(
            "before_update", Params(next_props), dict(next_state or {})
        )

    def component_did_update(self, prev_props, prev_state) -> HookOutcome:
        return self._run_hooks(
            "after_update",
            Params(prev_props),
            dict(prev_state or {}),
            then=store.update_states_to_observe,
        )

    def component_will_unmount(self) -> HookOutcome:
        try:
            return self._run_hooks("before_unmount", then=store.remove)
        finally:
            self._native = None

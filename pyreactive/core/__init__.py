# pyreactive/core/__init__.py
from .callbacks import (
    HookOutcome,
    after_mount,
    after_update,
    before_mount,
    before_receive_props,
    before_unmount,
    before_update,
)
from .component import Component
from .console import Console, console
from .core import component_context, current, current_component
from .element import Children, Element, create_element
from .exceptions import ComponentNotFound, NoNativeComponent, PyReactiveError, RenderError
from .observable import Observable
from .params import ExportedState, OtherParams, Param, Params, State
from .rendering import (
    BuiltinTag,
    ComponentClass,
    RenderingContext,
    Unresolved,
    rendering_context,
    resolve,
)
from .state import STATE_UPDATED_AT, StateStore, store
from .top_level import TopLevelComponent, resolve_top_level
from .validator import ListOf, ParamDeclaration, Validator

__all__ = [
    "Component",
    "Param",
    "OtherParams",
    "State",
    "ExportedState",
    "Params",
    "Observable",
    "Element",
    "Children",
    "create_element",
    "before_mount",
    "after_mount",
    "before_receive_props",
    "before_update",
    "after_update",
    "before_unmount",
    "HookOutcome",
    "StateStore",
    "store",
    "STATE_UPDATED_AT",
    "RenderingContext",
    "rendering_context",
    "resolve",
    "BuiltinTag",
    "ComponentClass",
    "Unresolved",
    "Validator",
    "ParamDeclaration",
    "ListOf",
    "TopLevelComponent",
    "resolve_top_level",
    "Console",
    "console",
    "current",
    "current_component",
    "component_context",
    "PyReactiveError",
    "NoNativeComponent",
    "ComponentNotFound",
    "RenderError",
]

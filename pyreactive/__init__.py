from .config import Settings, get_settings, reset_settings
from .core import (
    Children,
    Component,
    ComponentNotFound,
    Element,
    ExportedState,
    NoNativeComponent,
    Observable,
    OtherParams,
    Param,
    Params,
    State,
    TopLevelComponent,
    after_mount,
    after_update,
    before_mount,
    before_receive_props,
    before_unmount,
    before_update,
    console,
    create_element,
    store,
)
from .engine import Engine, render_to_static_markup

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
    "TopLevelComponent",
    "store",
    "console",
    "Engine",
    "render_to_static_markup",
    "Settings",
    "get_settings",
    "reset_settings",
    "ComponentNotFound",
    "NoNativeComponent",
]

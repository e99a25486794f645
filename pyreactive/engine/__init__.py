from pyreactive.core.element import create_element

from .native import HostNode, NativeComponent, TextNode
from .renderer import render_mounted, render_to_static_markup
from .runtime import Engine

__all__ = [
    "Engine",
    "NativeComponent",
    "HostNode",
    "TextNode",
    "create_element",
    "render_mounted",
    "render_to_static_markup",
]

class PyReactiveError(Exception):
    """Base class for errors raised by the component runtime."""


class NoNativeComponent(PyReactiveError):
    """State, params or refs were touched without a live native handle."""

    def __init__(self, component=None, action: str = "access"):
        self.component = component
        name = type(component).__name__ if component is not None else "component"
        super().__init__(f"No native component associated with {name} ({action})")


class ComponentNotFound(PyReactiveError):
    def __init__(self, component_name: str, controller: str, paths_searched):
        self.component_name = component_name
        self.controller = controller
        self.paths_searched = list(paths_searched)
        super().__init__(
            f"Could not find component class '{component_name}' for controller "
            f"'{controller}' in any component directory. "
            f"Tried [{', '.join(self.paths_searched)}]"
        )


class RenderError(PyReactiveError):
    pass

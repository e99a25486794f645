from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse

from pyreactive.core.console import console
from pyreactive.core.element import create_element
from pyreactive.core.exceptions import ComponentNotFound
from pyreactive.core.top_level import TopLevelComponent, load_search_path, resolve_top_level
from pyreactive.engine.renderer import render_to_static_markup

logger = logging.getLogger(__name__)


def create_fastapi_app(search_path: Optional[Iterable[Any]] = None) -> FastAPI:
    """Create the FastAPI app serving top-level components as static markup.

    ``search_path`` holds modules (or module names) searched for components;
    when omitted ``PYREACTIVE_COMPONENT_PATH`` is used.
    """
    app = FastAPI()
    roots = load_search_path(search_path)

    class AppTopLevel(TopLevelComponent):
        pass

    AppTopLevel.search_path = roots
    app.state.search_path = roots

    @app.get("/favicon.ico")
    async def favicon():
        return Response(status_code=204, media_type="image/x-icon")

    @app.get("/console")
    async def console_entries(level: Optional[str] = None):
        return {"level": level, "entries": console.entries(level)}

    @app.get("/components/{controller}/{component_name:path}")
    async def render_component(controller: str, component_name: str, request: Request):
        # fail with the search trail before rendering anything
        try:
            resolve_top_level(controller, component_name, roots)
        except ComponentNotFound as e:
            logger.info("component lookup failed: %s", e)
            raise HTTPException(
                status_code=404,
                detail={"error": str(e), "paths_searched": e.paths_searched},
            )

        element = create_element(
            AppTopLevel,
            {
                "controller": controller,
                "component_name": component_name,
                "render_params": dict(request.query_params),
            },
        )
        return HTMLResponse(render_to_static_markup(element))

    return app

def run_web(search_path=None, *, host=None, port=None, reload=False, **uvicorn_kwargs):
    import uvicorn
    from pyreactive.config import get_settings
    from pyreactive.web.server import create_fastapi_app

    settings = get_settings()
    fastapi_app = create_fastapi_app(search_path)
    uvicorn.run(
        fastapi_app,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        **uvicorn_kwargs,
    )

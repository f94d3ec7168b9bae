"""
HTTP transport for the co-signer callback.

- ``POST /v2/tx_sign_request`` - transaction approval requests
- ``POST /v2/config_change_sign_request`` - configuration change requests
- ``GET /health`` - liveness check
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from .config import Settings, configure_logging
from .handler import CallbackHandler
from .keys import KeyMaterial
from .version import __version__

logger = logging.getLogger(__name__)


def create_app(keys: KeyMaterial, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the callback application.

    Args:
        keys: Key material loaded at startup
        settings: Process settings

    Returns:
        FastAPI application
    """
    settings = settings or Settings()
    app = FastAPI(title="Co-signer Callback", version=__version__)
    app.state.handler = CallbackHandler(keys, settings)

    @app.post("/v2/tx_sign_request")
    async def tx_sign_request(request: Request) -> Response:
        body = await request.body()
        status, content = await run_in_threadpool(request.app.state.handler.handle, body)
        return Response(content=content, status_code=status, media_type="text/plain")

    @app.post("/v2/config_change_sign_request")
    async def config_change_sign_request(request: Request) -> Response:
        body = await request.body()
        status, content = await run_in_threadpool(
            request.app.state.handler.handle_config_change, body
        )
        return Response(content=content, status_code=status, media_type="text/plain")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


def main() -> None:
    """Entry point: load settings and keys, then serve."""
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    keys = KeyMaterial.from_settings(settings)
    app = create_app(keys, settings)

    logger.info(f"Starting co-signer callback v{__version__} on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

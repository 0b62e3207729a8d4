import contextlib
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from ipfs_gateway.api.health import router as health_router
from ipfs_gateway.api.ipfs import router as ipfs_router
from ipfs_gateway.config import Settings, settings
from ipfs_gateway.cors import setup_cors
from ipfs_gateway.ipfs_client import IpfsClient
from ipfs_gateway.observability import RequestLoggingMiddleware, configure_logging

logger = logging.getLogger(__name__)


def create_app(
    current: Settings | None = None,
    ipfs_client: IpfsClient | None = None,
) -> FastAPI:
    """
    Build the gateway application.

    `ipfs_client` lets callers swap the node client (tests pass one backed by a
    mock transport); otherwise one is built from `current` on startup. The
    client is closed on shutdown either way.
    """
    current = current or settings

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        client = ipfs_client or IpfsClient.from_settings(current)
        app.state.ipfs_client = client
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="IPFS Gateway", version="0.1.0", lifespan=lifespan)
    app.state.settings = current

    app.add_middleware(RequestLoggingMiddleware)
    setup_cors(app, current)

    app.include_router(health_router)
    app.include_router(ipfs_router)
    # Mounted last: anything the API routes don't claim is looked up on disk.
    app.mount("/", StaticFiles(directory=current.static_dir, html=True), name="static")
    return app


def run() -> None:
    configure_logging(settings)
    app = create_app(settings)
    logger.info("gateway running at http://localhost:%d", settings.gateway_port)
    uvicorn.run(app, host=settings.gateway_host, port=settings.gateway_port, log_config=None)

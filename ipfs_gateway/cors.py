from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ipfs_gateway.config import Settings, get_cors_origins


def setup_cors(app: FastAPI, current: Settings) -> None:
    # Browser pages served from other origins upload and download through the gateway.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(current),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "x-request-id"],
    )

import hashlib
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.testclient import TestClient

from ipfs_gateway.config import Settings
from ipfs_gateway.ipfs_client import IpfsClient
from ipfs_gateway.main import create_app

NODE_URL = "http://ipfs.test"


class FakeIpfsNode:
    """In-memory stand-in for the node's RPC API."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.uploads: list[tuple[str | None, str | None]] = []
        self.app = FastAPI()
        self.app.post("/api/v0/add")(self.add)
        self.app.get("/api/v0/cat")(self.cat)
        self.app.post("/api/v0/version")(self.version)

    async def add(self, request: Request) -> dict:
        form = await request.form()
        upload = form["file"]
        content = await upload.read()
        digest = "Qm" + hashlib.sha256(content).hexdigest()[:44]
        self.blobs[digest] = content
        self.uploads.append((upload.filename, upload.content_type))
        return {"Name": upload.filename, "Hash": digest, "Size": str(len(content))}

    async def cat(self, arg: str) -> Response:
        if arg not in self.blobs:
            return PlainTextResponse("merkledag: not found", status_code=500)
        return Response(self.blobs[arg], media_type="text/plain")

    async def version(self) -> dict:
        return {"Version": "0.29.0", "Commit": "", "Repo": "15"}


@pytest.fixture
def fake_node() -> FakeIpfsNode:
    return FakeIpfsNode()


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>upload page</h1>", encoding="utf-8")
    (public / "app.js").write_text("console.log('gateway');", encoding="utf-8")
    return public


@pytest.fixture
def gateway_settings(static_dir: Path) -> Settings:
    return Settings(ipfs_api_url=NODE_URL, static_dir=str(static_dir), log_json=False)


@pytest.fixture
def make_client(gateway_settings: Settings) -> Callable[[httpx.AsyncBaseTransport], TestClient]:
    def _make(transport: httpx.AsyncBaseTransport) -> TestClient:
        ipfs_client = IpfsClient.from_settings(gateway_settings, transport=transport)
        return TestClient(create_app(gateway_settings, ipfs_client))

    return _make


@pytest.fixture
def client(make_client, fake_node: FakeIpfsNode) -> Iterator[TestClient]:
    with make_client(httpx.ASGITransport(app=fake_node.app)) as test_client:
        yield test_client

"""
IPFS node RPC client.

Used endpoints:
- POST /api/v0/add      multipart field `file` -> {"Name": ..., "Hash": ..., "Size": ...}
- GET  /api/v0/cat      ?arg=<hash>           -> raw content bytes
- POST /api/v0/version                         -> {"Version": ..., ...}
"""

from __future__ import annotations

from typing import Any

import httpx

from ipfs_gateway.config import Settings


# Every node failure surfaces as IpfsError so handlers can tell it apart from bugs.
class IpfsError(RuntimeError):
    pass


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise IpfsError("IPFS_API_URL is empty.")
    return base_url.rstrip("/")


class IpfsClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float = 30.0,
        connect_timeout_s: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = _normalize_base_url(base_url)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_s, connect=connect_timeout_s),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        current: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> IpfsClient:
        return cls(
            current.ipfs_api_url,
            timeout_s=current.ipfs_timeout_s,
            connect_timeout_s=current.ipfs_connect_timeout_s,
            transport=transport,
        )

    async def add(self, filename: str, content: bytes, content_type: str) -> dict[str, Any]:
        """
        Store `content` on the node and return its JSON answer unchanged.
        """
        try:
            resp = await self._client.post(
                "/api/v0/add",
                files={"file": (filename, content, content_type)},
            )
        except httpx.HTTPError as e:
            raise IpfsError(f"IPFS add request failed: {e!r}") from e

        if not resp.is_success:
            # Avoid dumping huge bodies; include a small snippet.
            raise IpfsError(f"IPFS add failed: {resp.status_code} {resp.text[:500]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise IpfsError("IPFS add returned malformed JSON.") from e
        if not isinstance(data, dict):
            raise IpfsError("IPFS add returned JSON that is not an object.")
        return data

    async def open_cat(self, content_hash: str) -> httpx.Response:
        """
        Start a cat request and return the response with its body still unread.

        The caller owns the returned response and must close it.
        """
        request = self._client.build_request("GET", "/api/v0/cat", params={"arg": content_hash})
        try:
            resp = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise IpfsError(f"IPFS cat request failed: {e!r}") from e

        if not resp.is_success:
            await resp.aclose()
            raise IpfsError(f"IPFS cat failed: {resp.status_code}")
        return resp

    async def version(self) -> str:
        try:
            resp = await self._client.post("/api/v0/version")
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise IpfsError(f"IPFS version request failed: {e!r}") from e
        if not isinstance(data, dict):
            raise IpfsError("IPFS version returned JSON that is not an object.")
        return str(data.get("Version", "unknown"))

    async def aclose(self) -> None:
        await self._client.aclose()

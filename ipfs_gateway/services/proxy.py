import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx
from starlette.datastructures import UploadFile

from ipfs_gateway.ipfs_client import IpfsClient, IpfsError
from ipfs_gateway.schemas import AddResult

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "file"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


async def forward_add(client: IpfsClient, file: UploadFile) -> dict:
    content = await file.read()
    data = await client.add(
        file.filename or DEFAULT_FILENAME,
        content,
        file.content_type or DEFAULT_CONTENT_TYPE,
    )
    result = AddResult.model_validate(data)
    logger.info("stored %s (%d bytes) as %s", file.filename, len(content), result.Hash)
    return data


@dataclass
class CatStream:
    upstream: httpx.Response
    chunks: AsyncIterator[bytes]

    async def aclose(self) -> None:
        await self.upstream.aclose()


async def open_cat_stream(client: IpfsClient, content_hash: str) -> CatStream:
    upstream = await client.open_cat(content_hash)
    body = upstream.aiter_bytes()
    # Read the first chunk before any header goes out so an unreadable body is still a clean failure.
    try:
        first = await anext(body, b"")
    except httpx.HTTPError as e:
        await upstream.aclose()
        raise IpfsError(f"IPFS cat body could not be read: {e!r}") from e
    except BaseException:
        await upstream.aclose()
        raise
    return CatStream(upstream=upstream, chunks=_relay(upstream, body, first))


async def _relay(
    upstream: httpx.Response,
    body: AsyncIterator[bytes],
    first: bytes,
) -> AsyncIterator[bytes]:
    try:
        if first:
            yield first
        async for chunk in body:
            yield chunk
    except httpx.HTTPError:
        # Headers are already on the wire; all that is left is to abort the client response.
        logger.exception("IPFS cat stream broke mid-relay")
        raise
    finally:
        await upstream.aclose()

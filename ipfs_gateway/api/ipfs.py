import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from starlette.background import BackgroundTask
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from ipfs_gateway.api.dependencies import get_ipfs_client
from ipfs_gateway.ipfs_client import IpfsClient, IpfsError
from ipfs_gateway.schemas import ErrorResponse
from ipfs_gateway.services.proxy import forward_add, open_cat_stream

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ipfs", tags=["ipfs"])

UPLOAD_FAILED = "IPFS upload failed"
FILE_REQUIRED = "file field is required"
DOWNLOAD_FAILED = "file download failed"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post("/add", responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def add(request: Request, client: IpfsClient = Depends(get_ipfs_client)) -> JSONResponse:
    try:
        form = await request.form()
    except HTTPException as exc:
        # Unparseable multipart bodies are treated like a missing file.
        logger.warning("rejected upload body: %s", exc.detail)
        return _error(400, FILE_REQUIRED)

    try:
        file = form.get("file")
        # Browsers submit an empty nameless part when no file was picked.
        if not isinstance(file, UploadFile) or (not file.filename and not file.size):
            return _error(400, FILE_REQUIRED)

        try:
            data = await forward_add(client, file)
        except IpfsError:
            logger.exception("IPFS upload failed for %s", file.filename)
            return _error(500, UPLOAD_FAILED)
        except Exception:  # noqa: BLE001
            logger.exception("unexpected error while uploading %s", file.filename)
            return _error(500, UPLOAD_FAILED)
        return JSONResponse(content=data)
    finally:
        await form.close()


@router.get("/cat/{content_hash}")
async def cat(
    content_hash: str,
    client: IpfsClient = Depends(get_ipfs_client),
) -> Response:
    try:
        stream = await open_cat_stream(client, content_hash)
    except IpfsError:
        logger.exception("IPFS download failed for %s", content_hash)
        return PlainTextResponse(DOWNLOAD_FAILED, status_code=500)
    except Exception:  # noqa: BLE001
        logger.exception("unexpected error while downloading %s", content_hash)
        return PlainTextResponse(DOWNLOAD_FAILED, status_code=500)

    return StreamingResponse(
        stream.chunks,
        media_type="application/octet-stream",
        headers={"Content-Disposition": "attachment"},
        background=BackgroundTask(stream.aclose),
    )

import json
import logging
import time
import uuid

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from ipfs_gateway.config import Settings, settings


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("request_id", "method", "path", "status_code", "latency_ms", "client_ip"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(current: Settings = settings) -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    level = getattr(logging, current.log_level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    if current.log_json:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    root.setLevel(level)
    root.addHandler(handler)


_access_logger = logging.getLogger("ipfs_gateway.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        response: Response | None = None
        exc: Exception | None = None
        try:
            response = await call_next(request)
            return response
        except Exception as err:  # noqa: BLE001
            exc = err
            raise
        finally:
            latency_ms = (time.perf_counter() - start) * 1000.0
            status_code = response.status_code if response else 500
            extra = {
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "latency_ms": round(latency_ms, 2),
                "client_ip": request.client.host if request.client else None,
            }
            if exc is None:
                _access_logger.info("request_complete", extra=extra)
            else:
                _access_logger.exception("request_failed", extra=extra)

            if response is not None:
                response.headers["x-request-id"] = request_id

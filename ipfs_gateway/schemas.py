from typing import Any

from pydantic import BaseModel, ConfigDict


class AddResult(BaseModel):
    """Result of the storage node's add call.

    The node owns this shape, so nothing here is type-checked: known keys are
    read when present and every key is returned to the caller untouched.
    """

    model_config = ConfigDict(extra="allow")

    Name: Any = None
    Hash: Any = None
    Size: Any = None


class ErrorResponse(BaseModel):
    error: str


class GatewayHealthResponse(BaseModel):
    status: str
    service: str
    backend: str

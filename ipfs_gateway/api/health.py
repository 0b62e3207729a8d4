from fastapi import APIRouter, Depends

from ipfs_gateway.api.dependencies import get_ipfs_client
from ipfs_gateway.ipfs_client import IpfsClient, IpfsError
from ipfs_gateway.schemas import GatewayHealthResponse

router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "ipfs-gateway"


@router.get("", response_model=GatewayHealthResponse)
async def health(client: IpfsClient = Depends(get_ipfs_client)) -> GatewayHealthResponse:
    try:
        version = await client.version()
    except IpfsError:
        return GatewayHealthResponse(status="degraded", service=SERVICE_NAME, backend="unreachable")
    return GatewayHealthResponse(status="ok", service=SERVICE_NAME, backend=version)

from fastapi import Request

from ipfs_gateway.ipfs_client import IpfsClient


def get_ipfs_client(request: Request) -> IpfsClient:
    return request.app.state.ipfs_client

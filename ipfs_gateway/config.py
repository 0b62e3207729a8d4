import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    ipfs_api_url: str = os.getenv("IPFS_API_URL", "http://127.0.0.1:5001")
    ipfs_timeout_s: float = float(os.getenv("IPFS_TIMEOUT_S", "30"))
    ipfs_connect_timeout_s: float = float(os.getenv("IPFS_CONNECT_TIMEOUT_S", "5"))
    gateway_host: str = os.getenv("GATEWAY_HOST", "0.0.0.0")
    gateway_port: int = int(os.getenv("GATEWAY_PORT", "8000"))
    static_dir: str = os.getenv("STATIC_DIR", ".")
    cors_allow_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "*")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "true").lower() == "true"


settings = Settings()


def get_cors_origins(current: Settings = settings) -> list[str]:
    origins = [item.strip() for item in current.cors_allow_origins.split(",") if item.strip()]
    return origins or ["*"]

"""
HTTP client utilities with connection pooling.
Provides the shared httpx client used for provider requests.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages the shared httpx client with connection pooling."""

    _provider_client: httpx.AsyncClient | None = None

    @classmethod
    def get_provider_client(cls) -> httpx.AsyncClient:
        """
        Get or create the shared httpx client for provider API calls.

        Features:
        - Connection pooling (reuses TCP connections across calls)
        - Long read timeout so slow reasoning streams are not cut off

        Returns:
            Configured httpx.AsyncClient
        """
        if cls._provider_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_CONNECTIONS,
                max_keepalive_connections=5,
                keepalive_expiry=30.0
            )

            cls._provider_client = httpx.AsyncClient(
                timeout=httpx.Timeout(Config.REQUEST_TIMEOUT, connect=Config.CONNECT_TIMEOUT),
                limits=limits,
                http2=True
            )

        return cls._provider_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close managed clients and clean up connections.
        """
        if cls._provider_client is not None:
            await cls._provider_client.aclose()
            cls._provider_client = None

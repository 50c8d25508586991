"""
Transport adapter for provider APIs.
Authenticated POST, server-sent-event decoding, JSON bodies and the
fallback access token, all cancellable through an asyncio.Event.
"""
import asyncio
import json
from contextlib import suppress
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, TypeVar

import httpx

from config import Config
from utils.errors import ApiError, RequestCancelled, StreamProtocolError
from utils.http_client import HTTPClientManager
from utils.logger import app_logger

T = TypeVar("T")

TokenProvider = Callable[[], Awaitable[str]]


def raise_if_cancelled(signal: Optional[asyncio.Event]) -> None:
    """Raise RequestCancelled when the signal has been set."""
    if signal is not None and signal.is_set():
        raise RequestCancelled()


async def abortable(awaitable: Awaitable[T], signal: Optional[asyncio.Event]) -> T:
    """
    Await `awaitable` unless `signal` is set first.

    The pending operation is cancelled when the signal wins, so the
    underlying request is torn down instead of left running.
    """
    if signal is None:
        return await awaitable

    if signal.is_set():
        close = getattr(awaitable, "close", None)
        if close is not None:
            close()
        raise RequestCancelled()

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(signal.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        raise

    if task in done:
        waiter.cancel()
        return task.result()

    task.cancel()
    with suppress(asyncio.CancelledError):
        await task

    # the operation may have completed in the same tick as the signal
    if task.done() and not task.cancelled() and task.exception() is None:
        await _discard(task.result())
    raise RequestCancelled()


async def _discard(result: Any) -> None:
    """Release a result that arrived after cancellation, such as an open streamed response."""
    aclose = getattr(result, "aclose", None)
    if aclose is not None:
        await aclose()


async def _config_access_token() -> str:
    return Config.ACCESS_TOKEN


class ProviderTransport:
    """HTTP primitives shared by every provider client."""

    STREAM_END = "[DONE]"

    def __init__(self, client: httpx.AsyncClient | None = None, token_provider: TokenProvider | None = None):
        """
        Args:
            client: httpx client to use, defaults to the shared pooled client
            token_provider: coroutine returning a bearer token when no API key is configured
        """
        self._client = client
        self._token_provider = token_provider or _config_access_token

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            return HTTPClientManager.get_provider_client()
        return self._client

    async def get_access_token(self) -> str:
        """Fallback credential lookup used when a client has no explicit key."""
        token = await self._token_provider()
        if not token:
            app_logger.warning("No API key configured and no fallback access token available")
        return token or ""

    async def post(
        self,
        url: str,
        headers: dict[str, str],
        body: dict[str, Any],
        signal: Optional[asyncio.Event] = None
    ) -> httpx.Response:
        """
        POST a JSON body and return the response with its body still unread.

        Raises:
            ApiError: the provider answered with a non-2xx status
            RequestCancelled: the signal was set before headers arrived
            httpx.HTTPError: network failures, unchanged
        """
        request = self.client.build_request("POST", url, headers=headers, json=body)
        app_logger.debug(f"POST {url} (stream={body.get('stream', False)})")

        response = await abortable(self.client.send(request, stream=True), signal)

        if response.is_error:
            try:
                raw = (await abortable(response.aread(), signal)).decode("utf-8", errors="replace")
            finally:
                await response.aclose()
            app_logger.error(f"Provider returned status {response.status_code} for {url}")
            raise ApiError(f"Status Code {response.status_code}, {raw}", payload=raw, status_code=response.status_code)

        return response

    async def read_json(self, response: httpx.Response, signal: Optional[asyncio.Event] = None) -> Any:
        """Read and decode a whole JSON response body."""
        try:
            raw = await abortable(response.aread(), signal)
        finally:
            await response.aclose()

        try:
            return json.loads(raw)
        except ValueError as e:
            raise StreamProtocolError(f"Response body is not valid JSON: {e}", raw=raw.decode("utf-8", errors="replace")) from e

    async def iter_events(self, response: httpx.Response, signal: Optional[asyncio.Event] = None) -> AsyncIterator[str]:
        """
        Yield one decoded `data` payload per server-sent event, in arrival order.

        Multi-line data fields are joined with newlines; comments and other
        fields (event, id, retry) are ignored. The response is closed when
        the iterator finishes, fails or is closed early.
        """
        lines = response.aiter_lines()
        data_lines: list[str] = []
        try:
            while True:
                try:
                    line = await abortable(lines.__anext__(), signal)
                except StopAsyncIteration:
                    break

                if not line:
                    if data_lines:
                        yield "\n".join(data_lines)
                        data_lines = []
                    continue

                if line.startswith(":"):
                    continue

                field, _, value = line.partition(":")
                if field == "data":
                    data_lines.append(value[1:] if value.startswith(" ") else value)

            if data_lines:
                yield "\n".join(data_lines)
        finally:
            await lines.aclose()
            await response.aclose()

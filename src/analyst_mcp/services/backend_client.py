"""HTTP client for the analytics backend"""

import logging
from typing import Any
from urllib.parse import quote, urlencode

import httpx
from pydantic import TypeAdapter, ValidationError

from .error_handler import BackendDecodeError, BackendError

logger = logging.getLogger(__name__)


def build_query(**params: Any) -> str:
    """Percent-encoded query string (with leading '?'), skipping None values."""
    present = {key: value for key, value in params.items() if value is not None}
    if not present:
        return ""
    return "?" + urlencode(present, quote_via=quote)


def encode_segment(value: str) -> str:
    """Percent-encode a value for use as a single URL path segment."""
    return quote(str(value), safe="")


def check_response(expected: Any, data: Any, path: str) -> Any:
    """Validate a decoded backend payload against an expected shape.

    Returns the payload unchanged; raises BackendDecodeError when it does not fit.
    """
    try:
        TypeAdapter(expected).validate_python(data)
    except ValidationError as e:
        raise BackendDecodeError(path, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e
    return data


class BackendClient:
    """Issues JSON calls against the analytics backend.

    No retries, timeouts or cancellation: a hung backend hangs the calling tool.
    """

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            timeout=None,
            transport=transport,
            headers={"User-Agent": "Cardinal-Analyst-MCP/0.1.0"},
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def get(self, path: str) -> Any:
        return await self._request("GET", path)

    async def post(self, path: str, body: Any) -> Any:
        return await self._request("POST", path, body)

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    async def _request(self, method: str, path: str, body: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {path}")

        if body is None:
            response = await self.client.request(method, url)
        else:
            response = await self.client.request(method, url, json=body)

        if not response.is_success:
            raise BackendError(path, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise BackendDecodeError(path, f"invalid JSON: {e}") from e

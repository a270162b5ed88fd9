"""
Base API Client - Shared request handling for the catalog and token server calls.
All API services should inherit from this or use its _core_async_* methods.

Every request is a single attempt: no retries, no rate limiting, no request
deduplication. Timeouts are left to aiohttp's defaults.
"""

import asyncio
import json
from typing import Any

import aiohttp

from utils.get_logger import get_logger

logger = get_logger(__name__)


class BaseAPIClient:
    """
    Base class for API clients with shared request handling.
    Failures never raise out of the helpers; they come back as (None, status).
    """

    # Status reported when the request never produced an HTTP response
    transport_error_status = 500

    @staticmethod
    async def _read_json(response: aiohttp.ClientResponse, url: str) -> Any:
        """Parse the body as JSON whatever the Content-Type; None if it is not JSON."""
        try:
            return await response.json(content_type=None)
        except (aiohttp.ContentTypeError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Response from {url} is not valid JSON: {e}")
            return None

    async def _core_async_request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, Any] | None = None,
    ) -> tuple[Any, int]:
        """
        Core async HTTP GET request.

        The body is parsed for every status code, so API error envelopes that
        arrive with 4xx/5xx statuses are still handed back to the caller.

        Args:
            url: Full URL to request
            params: Optional query parameters
            headers: Optional HTTP headers

        Returns:
            tuple: (parsed JSON | None, status_code)
        """
        try:
            async with (
                aiohttp.ClientSession() as session,
                session.get(url, headers=headers, params=params) as response,
            ):
                status = response.status
                data = await self._read_json(response, url)
            return data, status
        except asyncio.CancelledError:
            raise
        except (TimeoutError, aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error making request to {url}: {e}")
            return None, self.transport_error_status

    async def _core_async_post_request(
        self,
        url: str,
        json_body: dict[str, Any],
        headers: dict[str, Any] | None = None,
    ) -> tuple[Any, int]:
        """
        Core async HTTP POST request with a JSON body.

        Content-Type: application/json is added when the caller did not set it.

        Returns:
            tuple: (parsed JSON | None, status_code)
        """
        request_headers = dict(headers or {})
        request_headers.setdefault("Content-Type", "application/json")

        try:
            async with (
                aiohttp.ClientSession() as session,
                session.post(url, json=json_body, headers=request_headers) as response,
            ):
                status = response.status
                data = await self._read_json(response, url)
            return data, status
        except asyncio.CancelledError:
            raise
        except (TimeoutError, aiohttp.ClientError, ValueError) as e:
            # ValueError covers malformed URLs rejected by yarl before any I/O
            logger.error(f"Error making POST request to {url}: {e}")
            return None, self.transport_error_status

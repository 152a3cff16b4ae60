"""JSON-over-HTTP transport for the inventory and configuration services."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from automute._constants import JSON_CONTENT_TYPE, USER_AGENT
from automute.exceptions import AutoMuteTransportError, UnexpectedStatusError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...

    async def put_json(self, endpoint: str, payload: Mapping[str, Any]) -> None:
        ...


class HttpTransport:
    """Plain HTTP transport bound to one service base URL.

    No retries and no timeouts beyond the session defaults: a failed call
    raises and the caller decides whether to log and move on.
    """

    def __init__(self, base_url: str, http_session: aiohttp.ClientSession) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get_json(self, endpoint: str) -> Any:
        url = f"{self._base_url}{endpoint}"
        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers={"user-agent": USER_AGENT}) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise UnexpectedStatusError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except AutoMuteTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise AutoMuteTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise AutoMuteTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

    async def put_json(self, endpoint: str, payload: Mapping[str, Any]) -> None:
        url = f"{self._base_url}{endpoint}"
        body = json.dumps(payload)
        headers = {
            "content-type": JSON_CONTENT_TYPE,
            "user-agent": USER_AGENT,
        }
        _logger.debug("PUT %s body=%s", url, body)

        try:
            async with self._http.put(url, data=body, headers=headers) as resp:
                if resp.status != 200:
                    text = await resp.text()
                    raise UnexpectedStatusError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except AutoMuteTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise AutoMuteTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

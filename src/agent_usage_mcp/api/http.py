"""Single-shot HTTPS helpers shared by the API clients.

Every call opens its own ``httpx.AsyncClient`` with the configured timeout
and closes it when done. Failures are normalized to ``UpstreamError`` so
callers only ever see one exception family.
"""
from __future__ import annotations
import json
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from agent_usage_mcp.errors import HttpError, UpstreamError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


async def send(
    method: str,
    url: str,
    *,
    timeout: float,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
    json_body: Any = None,
    form: dict[str, str] | None = None,
) -> httpx.Response:
    """Send one request and return the response, whatever its status.

    Raises:
        UpstreamError: On timeout or transport failure
    """
    logger.debug(f"{method} {url}")
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json_body,
                data=form,
            )
    except httpx.TimeoutException as e:
        raise UpstreamError("Request timed out") from e
    except httpx.HTTPError as e:
        raise UpstreamError(str(e) or type(e).__name__) from e


def decode_body(response: httpx.Response) -> Any:
    """Return the JSON body, or the raw text when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


async def request_model(
    method: str,
    url: str,
    model: type[M],
    *,
    timeout: float,
    **kwargs: Any,
) -> M:
    """Send a request and validate a 200 JSON body against ``model``.

    Raises:
        HttpError: If the status is not 200
        UpstreamError: If the body is not JSON or does not match ``model``
    """
    response = await send(method, url, timeout=timeout, **kwargs)
    if response.status_code != 200:
        raise HttpError(
            response.status_code,
            f"HTTP {response.status_code}: {response.text[:500]}",
        )
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise UpstreamError(f"Invalid response: {e}") from e


async def request_json(
    method: str,
    url: str,
    *,
    operation: str,
    timeout: float,
    **kwargs: Any,
) -> Any:
    """Send a request and return the decoded 200 body without validation.

    Raises:
        HttpError: If the status is not 200, prefixed with ``operation``
    """
    response = await send(method, url, timeout=timeout, **kwargs)
    data = decode_body(response)
    if response.status_code != 200:
        raise HttpError(
            response.status_code,
            f"{operation} HTTP {response.status_code}: {json.dumps(data)[:300]}",
        )
    return data

"""HTTP adapter – HttpxHttpClient."""
from __future__ import annotations

from typing import Any

import httpx

from social_services.kernel.errors import ExternalServiceError, TimeoutError as InfraTimeoutError


class HttpxHttpClient:
    """Thin async httpx wrapper that maps transport failures onto the error hierarchy.

    *service* names the remote system in raised errors and log events.
    """

    def __init__(
        self,
        service: str,
        base_url: str = "",
        timeout: float = 10.0,
        **kwargs: Any,
    ) -> None:
        self._service = service
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, **kwargs)

    async def __aenter__(self) -> "HttpxHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", url, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as exc:
            raise InfraTimeoutError(
                f"{self._service}: request timed out: {method} {url}", cause=exc
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                service=self._service,
                message=f"HTTP {exc.response.status_code} from {method} {url}",
                status_code=exc.response.status_code,
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(service=self._service, message=str(exc), cause=exc) from exc


__all__ = ["HttpxHttpClient"]

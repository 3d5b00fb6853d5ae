"""
Vapi.ai API Client

Thin async wrapper over the Vapi assistant endpoints. Every failure (transport
error, timeout, non-2xx status, unusable body) surfaces as UpstreamError; the
caller decides what that means for local state.
"""
import logging
from typing import Optional

import httpx

from app.config import settings
from app.core.errors import UpstreamError

logger = logging.getLogger("uvicorn.error")


class VapiClient:
    """Vapi.ai assistant API client"""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport  # Tests plug in httpx.MockTransport here

    @property
    def name(self) -> str:
        return "Vapi.ai"

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> httpx.Response:
        if not self.is_available():
            raise UpstreamError(f"{self.name}: API key not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, headers=headers, json=json)
        except httpx.TimeoutException as exc:
            logger.error("[vapi] %s %s timed out after %ss", method, path, self.timeout)
            raise UpstreamError(f"{self.name}: request timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("[vapi] %s %s failed: %s", method, path, exc)
            raise UpstreamError(f"{self.name}: request failed") from exc

        logger.info("[vapi] %s %s -> %s", method, path, resp.status_code)
        if resp.is_error:
            raise UpstreamError(
                f"{self.name}: {method} {path} returned {resp.status_code}",
                upstream_status=resp.status_code,
            )
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> dict:
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError("Vapi.ai: response was not JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamError("Vapi.ai: unexpected response body")
        return data

    async def create_assistant(self, payload: dict) -> dict:
        """
        POST /assistant

        Returns:
            The provider document; guaranteed to contain a non-empty "id"
        """
        resp = await self._request("POST", "/assistant", json=payload)
        data = self._json(resp)
        if not data.get("id"):
            raise UpstreamError("Vapi.ai: create response has no assistant id")
        return data

    async def update_assistant(self, external_id: str, payload: dict) -> dict:
        resp = await self._request("PATCH", f"/assistant/{external_id}", json=payload)
        return self._json(resp)

    async def delete_assistant(self, external_id: str) -> None:
        """DELETE /assistant/{id}. A 404 is treated as already deleted."""
        try:
            await self._request("DELETE", f"/assistant/{external_id}")
        except UpstreamError as exc:
            if exc.upstream_status == 404:
                logger.warning("[vapi] assistant %s already gone on provider side", external_id)
                return
            raise


# Global singleton, built once from process configuration
vapi_client = VapiClient(
    api_key=settings.vapi_api_key,
    base_url=settings.vapi_api_base,
    timeout=settings.vapi_timeout_seconds,
)

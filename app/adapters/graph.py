"""Shared send logic for the Meta Graph API platforms (WhatsApp, Instagram)."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import httpx

from app.adapters.base import BasePlatformAdapter
from app.exceptions import SendError
from app.schemas.messaging import OutboundSendResult
from app.services.platform_service import PlatformService

logger = logging.getLogger(__name__)

GRAPH_API_BASE_URL = "https://graph.facebook.com"


class GraphAPIAdapter(BasePlatformAdapter):
    """Posts JSON to the Graph API with a bearer token over a shared httpx client."""

    def __init__(
        self,
        platforms: PlatformService,
        http_client: httpx.AsyncClient,
        verify_token: Optional[str] = None,
        api_version: str = "v18.0",
    ) -> None:
        super().__init__(platforms, verify_token=verify_token)
        self._http = http_client
        self._api_version = api_version

    def _url(self, path: str) -> str:
        return f"{GRAPH_API_BASE_URL}/{self._api_version}/{path}"

    async def _post(
        self,
        url: str,
        token: str,
        payload: dict[str, Any],
        ok_statuses: Iterable[int],
    ) -> OutboundSendResult:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._http.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error("%s send transport error: %s", self.channel.value, e)
            raise SendError(None, str(e) or type(e).__name__) from e

        if response.status_code not in ok_statuses:
            logger.error(
                "%s send failed: status=%s body=%s",
                self.channel.value,
                response.status_code,
                response.text[:500],
            )
            raise SendError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise SendError(response.status_code, response.text) from e
        if not isinstance(data, dict):
            raise SendError(response.status_code, response.text)
        return OutboundSendResult(
            success=True, platform_message_id=self._message_id(data)
        )

    def _message_id(self, data: dict[str, Any]) -> Optional[str]:
        return None

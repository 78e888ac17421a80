from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

import httpx

from models.outcomes import ServiceUnreachable

logger = logging.getLogger(__name__)


class ServiceClient:
    """Shared GET handling for the remote lookup services.

    Errors are converted into ``ServiceUnreachable`` values and logged; no
    request is retried or given a timeout.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get_json(
        self, url: str, params: Dict[str, Any]
    ) -> Union[Dict[str, Any], ServiceUnreachable]:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            return self._unreachable(exc.response.status_code, exc.response.text, str(exc))
        except httpx.RequestError as exc:
            return self._unreachable(None, "", str(exc) or type(exc).__name__)
        except ValueError as exc:
            return self._unreachable(response.status_code, response.text, f"Invalid JSON: {exc}")
        if not isinstance(payload, dict):
            return self._unreachable(response.status_code, response.text, "Unexpected response payload.")
        return payload

    @staticmethod
    def _unreachable(status: Optional[int], body: str, detail: str) -> ServiceUnreachable:
        logger.error(
            "Service request failed",
            extra={"status": status, "body": body.strip() or None, "detail": detail},
        )
        return ServiceUnreachable(status=status, body=body, detail=detail)

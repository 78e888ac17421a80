"""Realtime congestion lookup for a point of interest."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

import httpx

from models.outcomes import ServiceUnreachable, Unsupported
from models.records import CongestionSample, Coordinates, PointOfInterest
from services.http_client import ServiceClient

logger = logging.getLogger(__name__)

REALTIME_TYPE = 2


def select_realtime(entries: Iterable[Any]) -> Optional[Mapping[str, Any]]:
    """Return the first realtime occupancy entry, if any."""
    for entry in entries:
        if isinstance(entry, Mapping) and entry.get("type") == REALTIME_TYPE:
            return entry
    return None


class CongestionClient(ServiceClient):
    def __init__(
        self,
        base_url: str,
        app_key: str,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(client)
        self.base_url = base_url.rstrip("/")
        self._app_key = app_key

    async def fetch_congestion(
        self, poi: PointOfInterest, origin: Coordinates
    ) -> Union[CongestionSample, Unsupported, ServiceUnreachable]:
        """Fetch the realtime sample for ``poi``.

        ``origin`` is the requester's own position, not the POI's.
        """
        params = {
            "format": "json",
            "appKey": self._app_key,
            "lat": origin.latitude,
            "lng": origin.longitude,
        }
        payload = await self._get_json(f"{self.base_url}/{poi.id}", params)
        if isinstance(payload, ServiceUnreachable):
            return payload

        contents = payload.get("contents") or {}
        entries = contents.get("rltm") if isinstance(contents, dict) else None
        entry = select_realtime(entries) if isinstance(entries, list) else None
        if entry is None:
            logger.info("Unsupported location", extra={"poi_id": poi.id, "poi_name": poi.name})
            return Unsupported()

        try:
            ratio = float(entry.get("congestion"))
        except (TypeError, ValueError):
            # rendered as a non-numeric percentage further down
            ratio = float("nan")
        sample = CongestionSample(
            congestion_ratio=ratio,
            level=entry.get("congestionLevel"),
            timestamp_raw=entry.get("datetime"),
            poi_name=str(contents.get("poiName") or poi.name),
        )
        logger.info(
            "Realtime congestion fetched",
            extra={"poi_id": poi.id, "level": sample.level, "raw_timestamp": sample.timestamp_raw},
        )
        return sample

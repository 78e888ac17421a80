"""Reverse geocoding of coordinates into a point of interest."""

from __future__ import annotations

import logging
from typing import Optional, Union

import httpx

from models.outcomes import NotFound, ServiceUnreachable
from models.records import Coordinates, PointOfInterest
from services.http_client import ServiceClient

logger = logging.getLogger(__name__)

COORD_TYPE = "WGS84GEO"
REQUEST_LEVEL = "15"


class ReverseGeocodingClient(ServiceClient):
    def __init__(
        self,
        url: str,
        app_key: str,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(client)
        self.url = url
        self._app_key = app_key

    async def reverse_geocode(
        self, coords: Coordinates
    ) -> Union[PointOfInterest, NotFound, ServiceUnreachable]:
        params = {
            "version": "1",
            "format": "json",
            "reqLevel": REQUEST_LEVEL,
            "centerLon": coords.longitude,
            "centerLat": coords.latitude,
            "reqCoordType": COORD_TYPE,
            "resCoordType": COORD_TYPE,
            "appKey": self._app_key,
        }
        payload = await self._get_json(self.url, params)
        if isinstance(payload, ServiceUnreachable):
            return payload

        poi_info = payload.get("poiInfo")
        if not poi_info or not isinstance(poi_info, dict):
            logger.info(
                "No point of interest found",
                extra={"latitude": coords.latitude, "longitude": coords.longitude},
            )
            return NotFound()

        try:
            poi = PointOfInterest(
                id=str(poi_info["id"]),
                name=str(poi_info.get("name") or ""),
                latitude=float(poi_info["poiLat"]),
                longitude=float(poi_info["poiLon"]),
            )
        except (KeyError, TypeError, ValueError):
            logger.info("Point of interest payload incomplete", extra={"body": poi_info})
            return NotFound()

        logger.info("Point of interest resolved", extra={"poi_id": poi.id, "poi_name": poi.name})
        return poi

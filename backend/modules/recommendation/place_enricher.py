"""
modules/recommendation/place_enricher.py
-----------------------------------------
Attaches Place Details (reviews, photos, phone, website, hours, geometry,
address) to the top candidates.

Serialized and throttled: at most MAX_ENRICHED places, one details call at a
time with config.DETAIL_REQUEST_DELAY_S between consecutive calls. A failed
call keeps the place with its nearby-search fields.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import config
from modules.tool_usage.places_client import DETAIL_FIELDS, GooglePlacesClient, PlacesApiError
from schemas.recommendation import CandidatePlace

logger = logging.getLogger(__name__)

MAX_ENRICHED = 12


class PlaceEnricher:

    def __init__(
        self,
        client: GooglePlacesClient,
        delay_s: float = config.DETAIL_REQUEST_DELAY_S,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.delay_s = delay_s
        self._sleep = sleep

    def enrich(self, places: list[CandidatePlace]) -> list[CandidatePlace]:
        batch = places[:MAX_ENRICHED]
        if not self.client.configured:
            return batch

        for i, place in enumerate(batch):
            if i and self.delay_s > 0:
                self._sleep(self.delay_s)
            try:
                result = self.client.place_details(place.place_id, DETAIL_FIELDS)
            except PlacesApiError as exc:
                logger.warning("Details lookup failed for %r: %s", place.name, exc)
                continue
            try:
                place.apply_details(result)
            except (ValueError, TypeError) as exc:
                logger.warning("Malformed details for %r, keeping search fields: %s", place.name, exc)

        logger.info(
            "Enriched %d/%d places", sum(p.details_fetched for p in batch), len(batch),
        )
        return batch

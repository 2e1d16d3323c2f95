"""
api/routes/recommendations.py
------------------------------
POST /api/recommendations

Validates the search (400 on any violation, see api/server.py), runs the
recommendation pipeline and adds a `meta` block. The pipeline never raises
for upstream failures; it degrades to demo data instead.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from api.dependencies import get_recommendations
from modules.recommendation.composer import RecommendationService
from schemas.search import SearchRequest

logger = logging.getLogger(__name__)

router = APIRouter()

API_PROVIDER_LIVE = "Google Maps Platform"
API_PROVIDER_DEMO = "Fallback Demo"


@router.post("/recommendations", summary="Generate family recommendation packs")
def create_recommendations(
    search: SearchRequest,
    service: RecommendationService = Depends(get_recommendations),
) -> dict:
    started = time.perf_counter()
    logger.info("Recommendation request for %s (%s)", search.city, ", ".join(search.activity_names))

    result = service.recommend(search)

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    result["meta"] = {
        "processingTime": f"{elapsed_ms}ms",
        "apiProvider":    API_PROVIDER_DEMO if result.get("demoMode") else API_PROVIDER_LIVE,
        "generatedAt":    datetime.now(timezone.utc).isoformat(),
    }
    logger.info("Returned %d packs for %s in %dms", len(result["packs"]), search.city, elapsed_ms)
    return result

"""
api/routes/feedback.py
----------------------
POST /api/feedback               rate a recommendation pack (1-5, optional text)
GET  /api/feedback/stats         aggregate over the 100 most recent entries
GET  /api/feedback/pack/{id}     every entry for one pack plus its running stats
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_feedback
from modules.feedback.feedback_service import FeedbackService
from schemas.search import FeedbackRequest

router = APIRouter()


@router.post("", summary="Submit feedback for a pack")
def submit_feedback(
    body: FeedbackRequest,
    request: Request,
    service: FeedbackService = Depends(get_feedback),
) -> dict:
    entry = service.submit(
        pack_id=body.pack_id,
        rating=body.rating,
        feedback=body.feedback,
        user_agent=request.headers.get("user-agent"),
        client_ip=request.client.host if request.client else None,
    )
    return {
        "success": True,
        "message": "Feedback submitted successfully",
        "data": {
            "id":          entry.id,
            "packId":      entry.pack_id,
            "rating":      entry.rating,
            "submittedAt": datetime.now(timezone.utc).isoformat(),
        },
    }


@router.get("/stats", summary="Overall feedback statistics")
def feedback_stats(service: FeedbackService = Depends(get_feedback)) -> dict:
    return {"success": True, "data": service.overall_stats()}


@router.get("/pack/{pack_id}", summary="Feedback for one pack")
def pack_feedback(pack_id: str, service: FeedbackService = Depends(get_feedback)) -> dict:
    return {"success": True, "data": service.pack_feedback(pack_id)}

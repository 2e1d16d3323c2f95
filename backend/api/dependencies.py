"""
api/dependencies.py
-------------------
FastAPI dependencies resolving the per-process ServiceContainer.
"""
from __future__ import annotations

from fastapi import Request

from main import ServiceContainer
from modules.feedback.feedback_service import FeedbackService
from modules.recommendation.composer import RecommendationService
from modules.tool_usage.places_client import GooglePlacesClient


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_recommendations(request: Request) -> RecommendationService:
    return get_container(request).recommendations


def get_places_client(request: Request) -> GooglePlacesClient:
    return get_container(request).places_client


def get_feedback(request: Request) -> FeedbackService:
    return get_container(request).feedback

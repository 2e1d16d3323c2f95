"""modules/feedback: Pack ratings and feedback statistics."""

from modules.feedback.feedback_service import (
    FeedbackEntry, FeedbackService, FeedbackStore, InMemoryFeedbackStore,
    PackStats, PostgresFeedbackStore, build_feedback_store, calculate_feedback_stats,
    hash_ip,
)

__all__ = [
    "FeedbackEntry",
    "FeedbackService",
    "FeedbackStore",
    "InMemoryFeedbackStore",
    "PackStats",
    "PostgresFeedbackStore",
    "build_feedback_store",
    "calculate_feedback_stats",
    "hash_ip",
]

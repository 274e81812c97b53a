"""
Centralized fallback responses used when the feedback service fails.
"""

from typing import List
from answerbank.models.schemas import (
    ResponseFeedback,
    PracticeFeedback,
    ScoreBreakdown,
    StarAnalysis,
    StarValidation,
)
from answerbank.utils.text_metrics import count_words, estimate_duration_seconds

NEUTRAL_SCORE = 5
UNAVAILABLE_MESSAGE = "AI feedback temporarily unavailable"


class FallbackResponses:
    """Deterministic stand-ins for every feedback operation."""

    @staticmethod
    def get_fallback_analysis(text: str) -> ResponseFeedback:
        """Neutral analysis; word count and duration are still computed from the text."""
        word_count = count_words(text)
        return ResponseFeedback(
            clarity_score=NEUTRAL_SCORE,
            star_method_score=NEUTRAL_SCORE,
            structure_score=NEUTRAL_SCORE,
            content_score=NEUTRAL_SCORE,
            overall_score=NEUTRAL_SCORE,
            strengths=["Response recorded"],
            suggestions=[UNAVAILABLE_MESSAGE],
            star_analysis=StarAnalysis(),
            word_count=word_count,
            estimated_duration_seconds=estimate_duration_seconds(word_count),
            is_fallback=True,
        )

    @staticmethod
    def get_fallback_practice_feedback() -> PracticeFeedback:
        return PracticeFeedback(
            score=NEUTRAL_SCORE,
            strengths=["Practice session recorded"],
            improvements=[UNAVAILABLE_MESSAGE],
            score_breakdown=ScoreBreakdown(
                clarity=NEUTRAL_SCORE,
                structure=NEUTRAL_SCORE,
                content=NEUTRAL_SCORE,
                delivery=NEUTRAL_SCORE,
            ),
            comparison_note="Feedback temporarily unavailable",
            is_fallback=True,
        )

    @staticmethod
    def get_fallback_star_validation() -> StarValidation:
        return StarValidation(
            follows_star=False,
            missing_components=[],
            suggestions=["AI validation temporarily unavailable"],
            is_fallback=True,
        )

    @staticmethod
    def get_fallback_improvements() -> List[str]:
        return ["AI suggestions temporarily unavailable"]

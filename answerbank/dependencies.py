"""
Dependency injection utilities for the response library API.
"""

from functools import lru_cache
from fastapi import Depends
from sqlalchemy.orm import Session
from answerbank.config import get_settings
from answerbank.database.connection import get_db
from answerbank.services.export_service import ExportService
from answerbank.services.feedback_generator import FeedbackGenerator
from answerbank.services.gap_analyzer import GapAnalyzer
from answerbank.services.practice_coach import PracticeCoach
from answerbank.services.relevance_ranker import RelevanceRanker
from answerbank.services.response_repository import ResponseRepository
from answerbank.services.tag_manager import TagManager
from answerbank.services.version_manager import VersionManager


@lru_cache()
def get_feedback_generator() -> FeedbackGenerator:
    """Process-wide feedback generator built from settings."""
    return FeedbackGenerator.from_config(get_settings().get_feedback_config())


def get_relevance_ranker() -> RelevanceRanker:
    settings = get_settings()
    return RelevanceRanker(settings.RESPONSE_SKILL_KEYWORDS, limit=settings.SUGGESTION_LIMIT)


def get_gap_analyzer() -> GapAnalyzer:
    return GapAnalyzer(get_settings().RESPONSE_REFERENCE_CATEGORIES)


def get_response_repository(db: Session = Depends(get_db)) -> ResponseRepository:
    return ResponseRepository(db)


def get_version_manager(
    db: Session = Depends(get_db),
    feedback_generator: FeedbackGenerator = Depends(get_feedback_generator),
) -> VersionManager:
    return VersionManager(db, feedback_generator, max_retries=get_settings().VERSION_CONFLICT_RETRIES)


def get_practice_coach(
    db: Session = Depends(get_db),
    feedback_generator: FeedbackGenerator = Depends(get_feedback_generator),
) -> PracticeCoach:
    return PracticeCoach(db, feedback_generator)


def get_tag_manager(db: Session = Depends(get_db)) -> TagManager:
    return TagManager(db)


def get_export_service(db: Session = Depends(get_db)) -> ExportService:
    return ExportService(db)

"""
Test configuration for Answerbank tests.

Provides a SQLite test database, a stub feedback generator and a FastAPI
test client with the database, auth and feedback dependencies overridden.
"""
# Set test environment variables BEFORE any imports that might use them
import os
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_answerbank.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("OLLAMA_BASE_URL", "http://ollama.test:11434")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from pathlib import Path
from typing import List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from answerbank.database.models import Base, Job, Response, ResponseTag
from answerbank.models.schemas import (
    CreateResponseRequest,
    PracticeFeedback,
    ResponseFeedback,
    ScoreBreakdown,
    StarAnalysis,
    StarValidation,
)
from answerbank.services.version_manager import VersionManager
from answerbank.utils.fallback_responses import FallbackResponses
from answerbank.utils.text_metrics import count_words, estimate_duration_seconds

TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class StubFeedbackGenerator:
    """In-process stand-in for FeedbackGenerator; records every call."""

    def __init__(self, fail: bool = False, score: float = 8.0):
        self.fail = fail
        self.score = score
        self.calls: List[tuple] = []

    async def analyze(self, text: str, question_type: str) -> ResponseFeedback:
        self.calls.append(("analyze", text, question_type))
        if self.fail:
            return FallbackResponses.get_fallback_analysis(text)
        word_count = count_words(text)
        return ResponseFeedback(
            clarity_score=self.score,
            star_method_score=self.score,
            structure_score=self.score,
            content_score=self.score,
            overall_score=self.score,
            strengths=["Clear structure"],
            suggestions=["Quantify the result"],
            star_analysis=StarAnalysis(situation=True, task=True, action=True, result=False),
            word_count=word_count,
            estimated_duration_seconds=estimate_duration_seconds(word_count),
        )

    async def compare_practice(self, original_text: str, practice_text: str, question_type: str) -> PracticeFeedback:
        self.calls.append(("compare_practice", original_text, practice_text, question_type))
        if self.fail:
            return FallbackResponses.get_fallback_practice_feedback()
        return PracticeFeedback(
            score=self.score,
            strengths=["Kept the key points"],
            improvements=["Slow down"],
            score_breakdown=ScoreBreakdown(clarity=8, structure=7, content=8, delivery=6),
            comparison_note="Close to the prepared answer",
        )

    async def validate_star_method(self, text: str) -> StarValidation:
        self.calls.append(("validate_star_method", text))
        if self.fail:
            return FallbackResponses.get_fallback_star_validation()
        return StarValidation(follows_star=False, missing_components=["result"], suggestions=["State the outcome"])

    async def suggest_improvements(self, text: str, question_type: str, tags: Optional[List[str]] = None) -> List[str]:
        self.calls.append(("suggest_improvements", text, question_type, tags))
        if self.fail:
            return FallbackResponses.get_fallback_improvements()
        return ["Add a metric to the result"]

    async def health_check(self) -> bool:
        return not self.fail


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Clear cached settings and remove the test database afterwards."""
    from answerbank.config import get_settings
    get_settings.cache_clear()

    yield

    test_db_path = Path("test_answerbank.db")
    if test_db_path.exists():
        test_db_path.unlink()


# Database fixtures
@pytest.fixture(scope="session")
def test_db_engine():
    """Create test database engine."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(test_db_engine):
    """Fresh schema and session per test."""
    Base.metadata.drop_all(bind=test_db_engine)
    Base.metadata.create_all(bind=test_db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    try:
        yield session
        session.rollback()
    finally:
        session.close()


# Feedback fixtures
@pytest.fixture
def feedback_stub():
    return StubFeedbackGenerator()


@pytest.fixture
def failing_feedback_stub():
    return StubFeedbackGenerator(fail=True)


@pytest.fixture
def version_manager(db_session, feedback_stub):
    return VersionManager(db_session, feedback_stub, max_retries=3)


@pytest.fixture
def create_response(version_manager):
    """Factory creating a response (and version 1) for the test user."""
    async def _create(
        text: str = "I resolved a conflict...",
        question_text: str = "Tell me about a conflict",
        question_type: str = "behavioral",
        question_category: Optional[str] = None,
        tags: Optional[List[dict]] = None,
        user_id: str = TEST_USER_ID,
    ) -> Response:
        request = CreateResponseRequest(
            question_text=question_text,
            question_type=question_type,
            question_category=question_category,
            current_response=text,
            tags=tags or [],
        )
        return await version_manager.create(user_id, request)

    return _create


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def sample_job(db_session):
    job = Job(
        user_id=TEST_USER_ID,
        title="Backend Engineer",
        company="Acme",
        description="Python and SQL experience required. Docker is a plus.",
    )
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    return job


def _make_response(
    tags: Optional[List[str]] = None,
    question_type: str = "behavioral",
    question_category: Optional[str] = None,
    success_rate: Optional[float] = None,
    text: str = "An answer",
) -> Response:
    """Unsaved Response with tags, for pure ranking and analysis tests."""
    response = Response(
        user_id=TEST_USER_ID,
        question_text="A question",
        question_type=question_type,
        question_category=question_category,
        current_response=text,
        success_rate=success_rate,
    )
    response.tags = [ResponseTag(tag_type="skill", tag_value=value) for value in tags or []]
    return response


# FastAPI client fixture
@pytest.fixture
def app():
    from answerbank.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app, db_session, feedback_stub):
    """Test client acting as TEST_USER_ID, with database and feedback overridden."""
    from answerbank.database.connection import get_db
    from answerbank.dependencies import get_feedback_generator
    from answerbank.middleware.auth_middleware import get_current_user_required

    client = TestClient(app)
    client.app.dependency_overrides[get_db] = lambda: db_session
    client.app.dependency_overrides[get_current_user_required] = lambda: {
        "id": TEST_USER_ID,
        "email": "test@example.com",
    }
    client.app.dependency_overrides[get_feedback_generator] = lambda: feedback_stub
    yield client
    client.app.dependency_overrides.clear()

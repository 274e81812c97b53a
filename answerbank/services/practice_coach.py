"""
Practice Coach: records rehearsals of a response and scores them against it.
"""
import uuid
from typing import List, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from answerbank.database.models import PracticeSession
from answerbank.exceptions import PersistenceError, ValidationError
from answerbank.models.schemas import PracticeFeedback, PracticeSessionRequest
from answerbank.services.feedback_generator import FeedbackGenerator
from answerbank.services.response_repository import IdLike, ResponseRepository
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)


class PracticeCoach:
    """Service for practice sessions."""

    def __init__(self, db: Session, feedback_generator: FeedbackGenerator):
        self.db = db
        self.repository = ResponseRepository(db)
        self.feedback_generator = feedback_generator

    async def create_practice_session(
        self,
        user_id: str,
        response_id: IdLike,
        request: PracticeSessionRequest,
    ) -> Tuple[PracticeSession, str]:
        """
        Score a practice attempt and persist it.

        Returns the stored session and the comparison note. The owning
        response's practice_count is incremented in the same transaction.
        """
        if not request.practice_text or not request.practice_text.strip():
            raise ValidationError("practice_text is required", context={"field": "practice_text"})

        response = self.repository.get_response(user_id, response_id)
        original_text = response.current_response
        question_type = response.question_type
        target_id = response.id
        # No transaction stays open across the feedback call.
        self.db.rollback()

        feedback: PracticeFeedback = await self.feedback_generator.compare_practice(
            original_text, request.practice_text, question_type
        )

        session = PracticeSession(
            id=uuid.uuid4(),
            user_id=user_id,
            response_id=target_id,
            practice_text=request.practice_text,
            delivery_time=request.delivery_time,
            ai_score=feedback.score,
            ai_feedback=feedback.model_dump(exclude={"comparison_note"}),
        )

        try:
            self.repository.add_practice_session(session)
            self.repository.increment_practice_count(target_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error recording practice session for response {target_id}: {e}")
            raise PersistenceError(f"Failed to record practice session: {e}")

        self.db.refresh(session)
        logger.info(f"Recorded practice session {session.id} for response {target_id} (score {feedback.score})")
        return session, feedback.comparison_note

    async def list_practice_sessions(self, user_id: str, response_id: IdLike) -> List[PracticeSession]:
        """All of the owner's sessions for a response, newest first."""
        response = self.repository.get_response(user_id, response_id)
        return self.repository.list_practice_sessions(user_id, response.id)

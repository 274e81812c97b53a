"""
Version Manager for the response library.

Owns the version chain of every response: creating version 1 on create,
appending max+1 on a text change, moving the current pointer on restore.
Feedback is requested outside any transaction: reads made beforehand are
ended first, so no connection or row lock is held across the network call.
"""
import uuid
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from answerbank.database.models import Response, ResponseVersion
from answerbank.exceptions import ConflictError, PersistenceError, ValidationError
from answerbank.models.schemas import CreateResponseRequest, ResponseFeedback, UpdateResponseRequest
from answerbank.services.feedback_generator import FeedbackGenerator
from answerbank.services.response_repository import IdLike, ResponseRepository
from answerbank.utils.text_metrics import count_words, estimate_duration_seconds
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)

PLAIN_FIELDS = ("question_text", "question_type", "question_category", "is_favorite")
NULLABLE_FIELDS = ("question_category",)


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", context={"field": field})
    return value


def _patched_fields(patch: UpdateResponseRequest) -> dict:
    """Plain fields sent in the patch; an explicit null only clears nullable columns."""
    fields = {}
    for name in PLAIN_FIELDS:
        if name not in patch.model_fields_set:
            continue
        value = getattr(patch, name)
        if value is None and name not in NULLABLE_FIELDS:
            continue
        fields[name] = value
    return fields


def _stored_feedback(feedback: ResponseFeedback) -> Optional[dict]:
    """Feedback persisted on a version; None when the generator fell back."""
    if feedback.is_fallback:
        return None
    return feedback.model_dump(exclude={"is_fallback"})


class VersionManager:
    """Service managing response creation, edits and the version chain."""

    def __init__(self, db: Session, feedback_generator: FeedbackGenerator, max_retries: int = 3):
        self.db = db
        self.repository = ResponseRepository(db)
        self.feedback_generator = feedback_generator
        self.max_retries = max(1, max_retries)

    def _build_version(
        self,
        response_id: uuid.UUID,
        user_id: str,
        number: int,
        text: str,
        feedback: ResponseFeedback,
        notes: Optional[str] = None,
    ) -> ResponseVersion:
        word_count = count_words(text)
        return ResponseVersion(
            id=uuid.uuid4(),
            response_id=response_id,
            user_id=user_id,
            version_number=number,
            response_text=text,
            ai_feedback=_stored_feedback(feedback),
            word_count=word_count,
            estimated_duration=estimate_duration_seconds(word_count),
            notes=notes,
        )

    def _next_version_number(self, response_id: uuid.UUID) -> int:
        return self.repository.max_version_number(response_id) + 1

    async def create(self, user_id: str, request: CreateResponseRequest) -> Response:
        """Create a response together with version 1 in a single transaction."""
        _require_text(request.question_text, "question_text")
        text = _require_text(request.current_response, "current_response")

        feedback = await self.feedback_generator.analyze(text, request.question_type)

        response_id = uuid.uuid4()
        response = Response(
            id=response_id,
            user_id=user_id,
            question_text=request.question_text,
            question_type=request.question_type,
            question_category=request.question_category,
            current_response=text,
            is_favorite=request.is_favorite,
            practice_count=0,
            success_count=0,
            total_uses=0,
            success_rate=None,
        )

        try:
            self.repository.add_response(response)
            self.db.flush()
            version = self._build_version(response_id, user_id, 1, text, feedback, request.notes)
            self.repository.add_version(version)
            response.current_version_id = version.id
            if request.tags:
                self.repository.add_tags(response, request.tags)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating response for user {user_id}: {e}")
            raise PersistenceError(f"Failed to create response: {e}")

        self.db.refresh(response)
        logger.info(f"Created response {response.id} with version 1 for user {user_id}")
        return response

    async def update(self, user_id: str, response_id: IdLike, patch: UpdateResponseRequest) -> Response:
        """
        Apply a patch to a response.

        A changed text appends version max+1 and repoints the response. The
        read-increment-write runs under a row lock and is retried when the
        unique (response_id, version_number) constraint rejects the insert.
        """
        response = self.repository.get_response(user_id, response_id)
        fields = _patched_fields(patch)

        new_text = patch.current_response
        if new_text is None or new_text == response.current_response:
            return self._apply_plain_update(response, fields)

        _require_text(new_text, "current_response")
        question_type = patch.question_type or response.question_type
        target_id = response.id
        self.db.rollback()

        feedback = await self.feedback_generator.analyze(new_text, question_type)

        for attempt in range(1, self.max_retries + 1):
            try:
                locked = self.repository.get_response(user_id, target_id, for_update=True)
                number = self._next_version_number(locked.id)
                version = self._build_version(locked.id, user_id, number, new_text, feedback, patch.notes)
                self.repository.add_version(version)
                self.repository.set_current_version(locked, version)
                if fields:
                    self.repository.apply_fields(locked, fields)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                logger.warning(
                    f"Version number conflict on response {target_id} "
                    f"(attempt {attempt}/{self.max_retries}): {e.orig}"
                )
                continue
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Error updating response {target_id}: {e}")
                raise PersistenceError(f"Failed to update response: {e}")

            self.db.refresh(locked)
            logger.info(f"Response {locked.id} advanced to version {number}")
            return locked

        raise ConflictError(
            "Could not allocate a version number, please retry",
            context={"response_id": str(target_id), "attempts": self.max_retries},
        )

    def _apply_plain_update(self, response: Response, fields: dict) -> Response:
        try:
            self.repository.apply_fields(response, fields)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating response {response.id}: {e}")
            raise PersistenceError(f"Failed to update response: {e}")
        self.db.refresh(response)
        return response

    async def restore_version(self, user_id: str, response_id: IdLike, version_id: IdLike) -> Response:
        """Point the response at an earlier version. Never creates a version."""
        response = self.repository.get_response(user_id, response_id)
        version = self.repository.get_version(response.id, version_id)

        try:
            self.repository.set_current_version(response, version)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error restoring version {version_id} of response {response.id}: {e}")
            raise PersistenceError(f"Failed to restore version: {e}")

        self.db.refresh(response)
        logger.info(f"Restored response {response.id} to version {version.version_number}")
        return response

    async def get_version_history(self, user_id: str, response_id: IdLike) -> List[ResponseVersion]:
        response = self.repository.get_response(user_id, response_id)
        return self.repository.list_versions(response.id)

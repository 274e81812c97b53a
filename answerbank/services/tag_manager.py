"""
Tag management for responses.
"""
from typing import Iterable
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from answerbank.database.models import Response
from answerbank.exceptions import PersistenceError
from answerbank.models.schemas import TagInput
from answerbank.services.response_repository import IdLike, ResponseRepository, utcnow
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)


class TagManager:
    """Adds and removes tags; both operations return the refreshed response."""

    def __init__(self, db: Session):
        self.db = db
        self.repository = ResponseRepository(db)

    def add_tags(self, user_id: str, response_id: IdLike, tags: Iterable[TagInput]) -> Response:
        response = self.repository.get_response(user_id, response_id)
        try:
            rows = self.repository.add_tags(response, tags)
            response.updated_at = utcnow()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error adding tags to response {response_id}: {e}")
            raise PersistenceError(f"Failed to add tags: {e}")

        self.db.refresh(response)
        logger.info(f"Added {len(rows)} tags to response {response.id}")
        return response

    def remove_tags(self, user_id: str, response_id: IdLike, tag_ids: Iterable[IdLike]) -> Response:
        response = self.repository.get_response(user_id, response_id)
        try:
            removed = self.repository.remove_tags(response, tag_ids)
            response.updated_at = utcnow()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error removing tags from response {response_id}: {e}")
            raise PersistenceError(f"Failed to remove tags: {e}")

        # Bulk delete bypasses the session, so reload the collection
        self.db.expire(response, ["tags"])
        self.db.refresh(response)
        logger.info(f"Removed {removed} tags from response {response.id}")
        return response

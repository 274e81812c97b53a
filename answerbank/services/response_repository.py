"""
Repository for the response library.

All reads and writes are scoped to the owning user. The repository never
commits on behalf of VersionManager's version writes (those run inside the
manager's own transaction); the simple CRUD operations here commit
themselves and roll back on database errors.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union
from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from answerbank.database.models import (
    Job,
    PracticeSession,
    Response,
    ResponseOutcome,
    ResponseTag,
    ResponseVersion,
)
from answerbank.exceptions import NotFoundError, PersistenceError
from answerbank.models.schemas import RecordOutcomeRequest, ResponseFilters, TagInput
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)

IdLike = Union[str, uuid.UUID]


def to_uuid(value: IdLike, kind: str = "resource") -> uuid.UUID:
    """Coerce a path/body id to UUID; malformed ids are treated as not found."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError):
        raise NotFoundError(f"{kind.capitalize()} not found", context={"id": str(value)})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def tag_values(response: Response) -> List[str]:
    return [tag.tag_value for tag in response.tags]


class ResponseRepository:
    """CRUD over responses, versions, tags, outcomes, practice sessions and job lookup."""

    def __init__(self, db: Session):
        self.db = db

    # Transactions
    def commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database commit failed: {e}")
            raise PersistenceError(f"Database error: {e}")

    # Responses
    def find_response(self, user_id: str, response_id: IdLike, for_update: bool = False) -> Optional[Response]:
        """Return the owner's response or None; ``for_update`` locks the row where supported."""
        query = self.db.query(Response).filter(
            Response.id == to_uuid(response_id, "response"),
            Response.user_id == user_id,
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_response(self, user_id: str, response_id: IdLike, for_update: bool = False) -> Response:
        response = self.find_response(user_id, response_id, for_update=for_update)
        if response is None:
            raise NotFoundError("Response not found", context={"response_id": str(response_id)})
        return response

    def list_responses(self, user_id: str, filters: Optional[ResponseFilters] = None) -> List[Response]:
        """List the owner's responses, newest update first, applying optional filters."""
        filters = filters or ResponseFilters()
        query = (
            self.db.query(Response)
            .options(selectinload(Response.tags))
            .filter(Response.user_id == user_id)
        )

        if filters.question_type:
            query = query.filter(Response.question_type == filters.question_type)
        if filters.question_category:
            query = query.filter(Response.question_category == filters.question_category)
        if filters.is_favorite is not None:
            query = query.filter(Response.is_favorite == filters.is_favorite)

        responses = query.order_by(Response.updated_at.desc()).all()

        if filters.tags:
            wanted = set(filters.tags)
            responses = [r for r in responses if any(value in wanted for value in tag_values(r))]
        return responses

    def search_by_tags(self, user_id: str, tags: Iterable[str]) -> List[Response]:
        """Responses having at least one tag value in ``tags``, each returned once."""
        wanted = [tag for tag in tags if tag]
        if not wanted:
            return []
        return (
            self.db.query(Response)
            .options(selectinload(Response.tags))
            .filter(Response.user_id == user_id)
            .filter(Response.tags.any(ResponseTag.tag_value.in_(wanted)))
            .order_by(Response.updated_at.desc())
            .all()
        )

    def add_response(self, response: Response):
        self.db.add(response)

    def apply_fields(self, response: Response, fields: Dict[str, Any]):
        """Set plain column values and bump updated_at."""
        for name, value in fields.items():
            setattr(response, name, value)
        response.updated_at = utcnow()

    def set_current_version(self, response: Response, version: ResponseVersion):
        """Point the response at ``version``, keeping current_response in sync."""
        response.current_response = version.response_text
        response.current_version_id = version.id
        response.updated_at = utcnow()

    def delete_response(self, user_id: str, response_id: IdLike):
        response = self.get_response(user_id, response_id)
        try:
            self.db.delete(response)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting response {response_id}: {e}")
            raise PersistenceError(f"Failed to delete response: {e}")
        logger.info(f"Deleted response {response_id} for user {user_id}")

    def increment_practice_count(self, response_id: uuid.UUID):
        """Atomic server-side increment; safe against concurrent practice sessions."""
        self.db.execute(
            update(Response)
            .where(Response.id == response_id)
            .values(practice_count=Response.practice_count + 1, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

    # Versions
    def max_version_number(self, response_id: uuid.UUID) -> int:
        current = (
            self.db.query(func.max(ResponseVersion.version_number))
            .filter(ResponseVersion.response_id == response_id)
            .scalar()
        )
        return current or 0

    def add_version(self, version: ResponseVersion):
        self.db.add(version)
        self.db.flush()

    def get_version(self, response_id: uuid.UUID, version_id: IdLike) -> ResponseVersion:
        version = (
            self.db.query(ResponseVersion)
            .filter(
                ResponseVersion.id == to_uuid(version_id, "version"),
                ResponseVersion.response_id == response_id,
            )
            .first()
        )
        if version is None:
            raise NotFoundError("Version not found", context={"version_id": str(version_id)})
        return version

    def list_versions(self, response_id: uuid.UUID) -> List[ResponseVersion]:
        return (
            self.db.query(ResponseVersion)
            .filter(ResponseVersion.response_id == response_id)
            .order_by(ResponseVersion.version_number.desc())
            .all()
        )

    def count_versions(self, response_id: uuid.UUID) -> int:
        return self.db.query(ResponseVersion).filter(ResponseVersion.response_id == response_id).count()

    # Tags
    def add_tags(self, response: Response, tags: Iterable[TagInput]) -> List[ResponseTag]:
        rows = [
            ResponseTag(id=uuid.uuid4(), response_id=response.id, tag_type=tag.tag_type, tag_value=tag.tag_value)
            for tag in tags
        ]
        self.db.add_all(rows)
        return rows

    def remove_tags(self, response: Response, tag_ids: Iterable[IdLike]) -> int:
        ids = [to_uuid(tag_id, "tag") for tag_id in tag_ids]
        if not ids:
            return 0
        return (
            self.db.query(ResponseTag)
            .filter(ResponseTag.response_id == response.id, ResponseTag.id.in_(ids))
            .delete(synchronize_session=False)
        )

    # Outcomes
    def record_outcome(self, user_id: str, response_id: IdLike, request: RecordOutcomeRequest) -> ResponseOutcome:
        response = self.get_response(user_id, response_id)
        outcome = ResponseOutcome(
            id=uuid.uuid4(),
            response_id=response.id,
            user_id=user_id,
            job_id=request.job_id,
            interview_date=request.interview_date,
            company=request.company,
            position=request.position,
            outcome=request.outcome,
            interviewer_reaction=request.interviewer_reaction,
            notes=request.notes,
        )
        self.db.add(outcome)
        self.commit()
        self.db.refresh(outcome)
        logger.info(f"Recorded outcome '{outcome.outcome}' for response {response.id}")
        return outcome

    def list_outcomes(self, response_id: uuid.UUID) -> List[ResponseOutcome]:
        return (
            self.db.query(ResponseOutcome)
            .filter(ResponseOutcome.response_id == response_id)
            .order_by(ResponseOutcome.created_at.desc())
            .all()
        )

    # Practice sessions
    def add_practice_session(self, session: PracticeSession):
        self.db.add(session)

    def list_practice_sessions(self, user_id: str, response_id: uuid.UUID, limit: Optional[int] = None) -> List[PracticeSession]:
        query = (
            self.db.query(PracticeSession)
            .filter(PracticeSession.user_id == user_id, PracticeSession.response_id == response_id)
            .order_by(PracticeSession.created_at.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_success_metrics(self, user_id: str, response_id: IdLike) -> Dict[str, Any]:
        """Counters plus outcome history and the five most recent practice sessions."""
        response = self.get_response(user_id, response_id)
        return {
            "response_id": response.id,
            "total_uses": response.total_uses or 0,
            "success_count": response.success_count or 0,
            "success_rate": response.success_rate or 0,
            "practice_count": response.practice_count or 0,
            "outcomes": self.list_outcomes(response.id),
            "recent_practices": self.list_practice_sessions(user_id, response.id, limit=5),
        }

    # Jobs
    def get_job(self, user_id: str, job_id: IdLike) -> Job:
        job = (
            self.db.query(Job)
            .filter(Job.id == to_uuid(job_id, "job"), Job.user_id == user_id)
            .first()
        )
        if job is None:
            raise NotFoundError("Job not found", context={"job_id": str(job_id)})
        return job

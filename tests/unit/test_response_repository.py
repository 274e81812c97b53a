"""
Unit tests for ResponseRepository.
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from answerbank.database.models import PracticeSession, Response, ResponseTag, ResponseVersion
from answerbank.exceptions import NotFoundError
from answerbank.models.schemas import RecordOutcomeRequest, ResponseFilters, UpdateResponseRequest
from answerbank.services.response_repository import ResponseRepository, to_uuid

USER_ID = "user-1"


def set_updated_at(db_session, response, minutes_ago):
    db_session.get(Response, response.id).updated_at = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
    db_session.commit()


class TestLookup:
    """Test cases for owner-scoped lookups."""

    @pytest.mark.unit
    def test_to_uuid_rejects_malformed_ids_as_not_found(self):
        with pytest.raises(NotFoundError, match="Response not found"):
            to_uuid("not-a-uuid", "response")

    @pytest.mark.unit
    def test_to_uuid_accepts_strings(self):
        value = uuid.uuid4()
        assert to_uuid(str(value)) == value

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_get_response_scoped_to_owner(self, db_session, create_response):
        response = await create_response()
        repository = ResponseRepository(db_session)

        assert repository.get_response(USER_ID, response.id).id == response.id
        assert repository.find_response("someone-else", response.id) is None
        with pytest.raises(NotFoundError):
            repository.get_response("someone-else", str(response.id))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_count_versions(self, db_session, create_response, version_manager):
        response = await create_response(text="First")
        await version_manager.update(USER_ID, response.id, UpdateResponseRequest(current_response="Second"))

        assert ResponseRepository(db_session).count_versions(response.id) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_get_job_scoped_to_owner(self, db_session, sample_job):
        repository = ResponseRepository(db_session)

        assert repository.get_job(USER_ID, sample_job.id).title == "Backend Engineer"
        with pytest.raises(NotFoundError, match="Job not found"):
            repository.get_job("someone-else", sample_job.id)


class TestListing:
    """Test cases for list_responses and search_by_tags."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_orders_by_updated_at_desc(self, db_session, create_response):
        older = await create_response(text="older")
        newer = await create_response(text="newer")
        set_updated_at(db_session, older, 10)
        set_updated_at(db_session, newer, 1)

        responses = ResponseRepository(db_session).list_responses(USER_ID)

        assert [r.current_response for r in responses] == ["newer", "older"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_filters(self, db_session, create_response):
        await create_response(question_type="technical", question_category="debugging")
        await create_response(question_type="behavioral", question_category="teamwork",
                              tags=[{"tag_type": "skill", "tag_value": "leadership"}])
        await create_response(user_id="someone-else", question_type="technical")
        repository = ResponseRepository(db_session)

        assert len(repository.list_responses(USER_ID)) == 2
        assert len(repository.list_responses(USER_ID, ResponseFilters(question_type="technical"))) == 1
        assert len(repository.list_responses(USER_ID, ResponseFilters(question_category="teamwork"))) == 1
        assert len(repository.list_responses(USER_ID, ResponseFilters(is_favorite=True))) == 0
        tagged = repository.list_responses(USER_ID, ResponseFilters(tags=["leadership", "python"]))
        assert [r.question_category for r in tagged] == ["teamwork"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_search_by_tags_deduplicates(self, db_session, create_response):
        both = await create_response(tags=[
            {"tag_type": "skill", "tag_value": "python"},
            {"tag_type": "skill", "tag_value": "sql"},
        ])
        await create_response(tags=[{"tag_type": "skill", "tag_value": "java"}])
        repository = ResponseRepository(db_session)

        results = repository.search_by_tags(USER_ID, ["python", "sql"])

        assert [r.id for r in results] == [both.id]

    @pytest.mark.unit
    def test_search_without_tags_is_empty(self, db_session):
        assert ResponseRepository(db_session).search_by_tags(USER_ID, []) == []


class TestDeleteAndMetrics:
    """Test cases for delete_response, record_outcome and get_success_metrics."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_cascades(self, db_session, create_response):
        response = await create_response(tags=[{"tag_type": "skill", "tag_value": "python"}])
        repository = ResponseRepository(db_session)
        repository.record_outcome(USER_ID, response.id, RecordOutcomeRequest(outcome="pending"))

        repository.delete_response(USER_ID, response.id)

        assert db_session.query(Response).count() == 0
        assert db_session.query(ResponseVersion).count() == 0
        assert db_session.query(ResponseTag).count() == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_requires_ownership(self, db_session, create_response):
        response = await create_response()

        with pytest.raises(NotFoundError):
            ResponseRepository(db_session).delete_response("someone-else", response.id)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_record_outcome_leaves_success_fields_untouched(self, db_session, create_response):
        response = await create_response()
        repository = ResponseRepository(db_session)

        outcome = repository.record_outcome(
            USER_ID,
            response.id,
            RecordOutcomeRequest(outcome="offer", company="Acme", interviewer_reaction="positive"),
        )

        assert outcome.outcome == "offer"
        assert outcome.user_id == USER_ID
        refreshed = repository.get_response(USER_ID, response.id)
        assert refreshed.success_count == 0
        assert refreshed.success_rate is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_metrics(self, db_session, create_response):
        response = await create_response()
        repository = ResponseRepository(db_session)
        repository.record_outcome(USER_ID, response.id, RecordOutcomeRequest(outcome="rejected"))
        now = datetime.now(timezone.utc)
        for minutes in range(7):
            db_session.add(PracticeSession(
                user_id=USER_ID,
                response_id=response.id,
                practice_text=f"attempt {minutes}",
                ai_score=6,
                created_at=now - timedelta(minutes=minutes),
            ))
        db_session.commit()

        metrics = repository.get_success_metrics(USER_ID, response.id)

        assert metrics["success_rate"] == 0
        assert metrics["total_uses"] == 0
        assert len(metrics["outcomes"]) == 1
        assert [p.practice_text for p in metrics["recent_practices"]] == [f"attempt {i}" for i in range(5)]

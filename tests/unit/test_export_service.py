"""
Unit tests for ExportService.
"""
import pytest

from answerbank.models.schemas import ResponseFilters
from answerbank.services.export_service import PREP_GUIDE_TITLE, ExportService

USER_ID = "user-1"


class TestExportService:
    """Test cases for export_prep_guide."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_groups_by_question_type(self, db_session, create_response):
        await create_response(question_type="behavioral")
        await create_response(question_type="behavioral")
        await create_response(question_type="technical")

        guide = ExportService(db_session).export_prep_guide(USER_ID)

        assert guide.title == PREP_GUIDE_TITLE == "Interview Preparation Guide"
        assert guide.total_responses == 3
        assert {key: len(value) for key, value in guide.responses_by_type.items()} == {
            "behavioral": 2,
            "technical": 1,
        }
        assert guide.generated_at is not None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_filters_by_type_and_tags(self, db_session, create_response):
        await create_response(question_type="technical", tags=[{"tag_type": "skill", "tag_value": "python"}])
        await create_response(question_type="technical", tags=[{"tag_type": "skill", "tag_value": "java"}])
        await create_response(question_type="behavioral", tags=[{"tag_type": "skill", "tag_value": "python"}])

        guide = ExportService(db_session).export_prep_guide(
            USER_ID, ResponseFilters(question_type="technical", tags=["python", "go"])
        )

        assert guide.total_responses == 1
        assert list(guide.responses_by_type) == ["technical"]
        assert guide.responses_by_type["technical"][0].tags[0].tag_value == "python"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_only_owner_responses(self, db_session, create_response):
        await create_response(user_id="someone-else")

        guide = ExportService(db_session).export_prep_guide(USER_ID)

        assert guide.total_responses == 0
        assert guide.responses_by_type == {}

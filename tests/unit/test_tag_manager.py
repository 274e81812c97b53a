"""
Unit tests for TagManager.
"""
import uuid
import pytest

from answerbank.exceptions import NotFoundError
from answerbank.models.schemas import TagInput
from answerbank.services.tag_manager import TagManager

USER_ID = "user-1"


class TestTagManager:
    """Test cases for adding and removing tags."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_add_tags_appends_without_dedup(self, db_session, create_response):
        response = await create_response(tags=[{"tag_type": "skill", "tag_value": "python"}])
        manager = TagManager(db_session)

        updated = manager.add_tags(
            USER_ID,
            response.id,
            [TagInput(tag_type="skill", tag_value="python"), TagInput(tag_type="company", tag_value=" Acme ")],
        )

        values = sorted(tag.tag_value for tag in updated.tags)
        assert values == ["Acme", "python", "python"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_remove_tags_scoped_to_response(self, db_session, create_response):
        first = await create_response(tags=[{"tag_type": "skill", "tag_value": "sql"}])
        second = await create_response(tags=[{"tag_type": "skill", "tag_value": "aws"}])
        manager = TagManager(db_session)
        foreign_tag_id = second.tags[0].id

        updated = manager.remove_tags(USER_ID, first.id, [first.tags[0].id, foreign_tag_id])

        assert updated.tags == []
        db_session.refresh(second)
        assert [tag.tag_value for tag in second.tags] == ["aws"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_tags_require_ownership(self, db_session, create_response):
        response = await create_response()
        manager = TagManager(db_session)

        with pytest.raises(NotFoundError):
            manager.add_tags("someone-else", response.id, [TagInput(tag_type="skill", tag_value="go")])
        with pytest.raises(NotFoundError):
            manager.remove_tags("someone-else", response.id, [uuid.uuid4()])

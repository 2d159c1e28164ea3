"""Unit tests for TagService."""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from app.domains.tag.service import TagService
from app.exceptions.base import UnauthorizedError, ValidationError
from app.exceptions.tag import DuplicateTagError, TagNotFoundError
from app.schemas.tag import TagCreate, TagUpdate
from models import TodoTag
from tests.factories import TagFactory, TodoFactory


async def _link(db, user, tag, count):
    todos = [TodoFactory.build(user_id=user.id) for _ in range(count)]
    db.add_all(todos)
    await db.flush()
    db.add_all([TodoTag(todo_id=todo.id, tag_id=tag.id) for todo in todos])
    await db.commit()


class TestTagService:
    """Test cases for TagService."""

    @pytest.mark.asyncio
    async def test_create_is_idempotent_and_case_insensitive(self, test_db, test_user):
        service = TagService(test_db)

        first = await service.create_tag(TagCreate(name="Urgent"), test_user.id)
        second = await service.create_tag(TagCreate(name="urgent", color="#000000"), test_user.id)

        assert first["name"] == "urgent"
        assert first["created"] is True
        assert second["created"] is False
        assert second["id"] == first["id"]
        # The existing tag is returned unchanged
        assert second["color"] == "#6b7280"

    @pytest.mark.asyncio
    async def test_list_ordered_by_name_with_counts(self, test_db, test_user, tagged_todo):
        service = TagService(test_db)

        result = await service.get_tags_list(test_user.id)

        assert [tag["name"] for tag in result] == ["alpha", "beta", "gamma"]
        assert [tag["todo_count"] for tag in result] == [1, 1, 0]

    @pytest.mark.asyncio
    async def test_popular_tags(self, test_db, test_user, test_tags):
        alpha, beta, gamma = test_tags
        await _link(test_db, test_user, gamma, 3)
        await _link(test_db, test_user, alpha, 1)
        await _link(test_db, test_user, beta, 1)
        service = TagService(test_db)

        result = await service.get_popular_tags(test_user.id, limit=2)

        assert [tag["name"] for tag in result] == ["gamma", "alpha"]
        assert result[0]["todo_count"] == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 101])
    async def test_popular_tags_limit_bounds(self, test_db, test_user, limit):
        service = TagService(test_db)

        with pytest.raises(ValidationError):
            await service.get_popular_tags(test_user.id, limit=limit)

    @pytest.mark.asyncio
    async def test_search_tags(self, test_db, test_user):
        test_db.add_all(
            [TagFactory.build(name=name) for name in ("work", "homework", "play", "100%_done")]
        )
        await test_db.commit()
        service = TagService(test_db)

        result = await service.search_tags("WORK", test_user.id)
        literal = await service.search_tags("%_", test_user.id)

        assert [tag["name"] for tag in result] == ["homework", "work"]
        assert [tag["name"] for tag in literal] == ["100%_done"]

    @pytest.mark.asyncio
    async def test_search_ranks_by_usage(self, test_db, test_user):
        tags = [TagFactory.build(name=name) for name in ("dev-a", "dev-b")]
        test_db.add_all(tags)
        await test_db.commit()
        await _link(test_db, test_user, tags[1], 2)
        service = TagService(test_db)

        result = await service.search_tags("dev", test_user.id)

        assert [tag["name"] for tag in result] == ["dev-b", "dev-a"]

    @pytest.mark.asyncio
    async def test_search_blank_query_rejected(self, test_db, test_user):
        service = TagService(test_db)

        with pytest.raises(ValidationError):
            await service.search_tags("   ", test_user.id)

    @pytest.mark.asyncio
    async def test_update_lowercases_name(self, test_db, test_user, test_tags):
        service = TagService(test_db)

        result = await service.update_tag(test_tags[0].id, TagUpdate(name="Omega"), test_user.id)

        assert result["name"] == "omega"

    @pytest.mark.asyncio
    async def test_update_onto_existing_name_conflicts(self, test_db, test_user, test_tags):
        service = TagService(test_db)

        with pytest.raises(DuplicateTagError):
            await service.update_tag(test_tags[0].id, TagUpdate(name="BETA"), test_user.id)

    @pytest.mark.asyncio
    async def test_update_missing_tag(self, test_db, test_user):
        service = TagService(test_db)

        with pytest.raises(TagNotFoundError):
            await service.update_tag(uuid.uuid4(), TagUpdate(color="#111111"), test_user.id)

    @pytest.mark.asyncio
    async def test_delete_tag_removes_links(self, test_db, test_user, tagged_todo, test_tags):
        service = TagService(test_db)

        assert await service.delete_tag(test_tags[0].id, test_user.id) is True

        rows = await test_db.execute(select(TodoTag.tag_id).where(TodoTag.todo_id == tagged_todo.id))
        assert rows.scalars().all() == [test_tags[1].id]

    @pytest.mark.asyncio
    async def test_requires_user(self):
        db = AsyncMock()
        service = TagService(db)

        with pytest.raises(UnauthorizedError):
            await service.get_tags_list(None)
        with pytest.raises(UnauthorizedError):
            await service.create_tag(TagCreate(name="x"), None)

        db.execute.assert_not_called()

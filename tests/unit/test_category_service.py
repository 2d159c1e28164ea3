"""Unit tests for CategoryService."""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from app.domains.category.service import CategoryService
from app.exceptions.base import UnauthorizedError
from app.exceptions.category import CategoryNotFoundError, DuplicateCategoryError
from app.schemas.category import CategoryCreate, CategoryUpdate
from models import Category, Todo
from tests.factories import TodoFactory


class TestCategoryService:
    """Test cases for CategoryService."""

    @pytest.mark.asyncio
    async def test_create_category_defaults(self, test_db, test_user):
        service = CategoryService(test_db)

        result = await service.create_category(CategoryCreate(name="  Home "), test_user.id)

        assert result["name"] == "Home"
        assert result["color"] == "#3b82f6"
        assert result["icon"] is None
        assert result["todo_count"] == 0
        assert result["user_id"] == test_user.id

    @pytest.mark.asyncio
    async def test_same_name_for_different_users(self, test_db, test_user, test_user_2):
        service = CategoryService(test_db)

        first = await service.create_category(CategoryCreate(name="Work"), test_user.id)
        second = await service.create_category(CategoryCreate(name="Work"), test_user_2.id)

        assert first["id"] != second["id"]

    @pytest.mark.asyncio
    async def test_duplicate_name_for_same_user(self, test_db, test_user):
        service = CategoryService(test_db)
        await service.create_category(CategoryCreate(name="Work"), test_user.id)

        with pytest.raises(DuplicateCategoryError) as exc_info:
            await service.create_category(CategoryCreate(name="Work"), test_user.id)

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_list_ordered_by_name_with_counts(self, test_db, test_user, test_user_2):
        service = CategoryService(test_db)
        zeta = await service.create_category(CategoryCreate(name="Zeta"), test_user.id)
        await service.create_category(CategoryCreate(name="Alpha"), test_user.id)
        await service.create_category(CategoryCreate(name="Hidden"), test_user_2.id)
        test_db.add_all(
            [TodoFactory.build(user_id=test_user.id, category_id=zeta["id"]) for _ in range(2)]
        )
        await test_db.commit()

        result = await service.get_categories_list(test_user.id)

        assert [c["name"] for c in result] == ["Alpha", "Zeta"]
        assert [c["todo_count"] for c in result] == [0, 2]

    @pytest.mark.asyncio
    async def test_get_other_users_category_not_found(
        self, test_db, test_user, other_user_category
    ):
        service = CategoryService(test_db)

        with pytest.raises(CategoryNotFoundError):
            await service.get_category_by_id(other_user_category.id, test_user.id)

    @pytest.mark.asyncio
    async def test_update_category(self, test_db, test_user, test_category):
        service = CategoryService(test_db)

        result = await service.update_category(
            test_category.id, CategoryUpdate(color="#00ff00", icon="briefcase"), test_user.id
        )

        assert result["name"] == "Work"
        assert result["color"] == "#00ff00"
        assert result["icon"] == "briefcase"

    @pytest.mark.asyncio
    async def test_update_to_own_name_is_allowed(self, test_db, test_user, test_category):
        service = CategoryService(test_db)

        result = await service.update_category(
            test_category.id, CategoryUpdate(name="Work"), test_user.id
        )

        assert result["name"] == "Work"

    @pytest.mark.asyncio
    async def test_update_onto_existing_name_conflicts(self, test_db, test_user, test_category):
        service = CategoryService(test_db)
        other = await service.create_category(CategoryCreate(name="Home"), test_user.id)

        with pytest.raises(DuplicateCategoryError):
            await service.update_category(other["id"], CategoryUpdate(name="Work"), test_user.id)

    @pytest.mark.asyncio
    async def test_update_other_users_category_not_found(
        self, test_db, test_user, other_user_category
    ):
        service = CategoryService(test_db)

        with pytest.raises(CategoryNotFoundError):
            await service.update_category(
                other_user_category.id, CategoryUpdate(name="Mine"), test_user.id
            )

    @pytest.mark.asyncio
    async def test_delete_detaches_todos(self, test_db, test_user, test_category):
        todos = [
            TodoFactory.build(user_id=test_user.id, category_id=test_category.id) for _ in range(3)
        ]
        test_db.add_all(todos)
        await test_db.commit()
        service = CategoryService(test_db)

        assert await service.delete_category(test_category.id, test_user.id) is True

        categories = await test_db.execute(select(Category).where(Category.id == test_category.id))
        assert categories.scalar_one_or_none() is None

        result = await test_db.execute(
            select(Todo)
            .where(Todo.id.in_([todo.id for todo in todos]))
            .execution_options(populate_existing=True)
        )
        remaining = result.scalars().all()
        assert len(remaining) == 3
        assert all(todo.category_id is None for todo in remaining)

    @pytest.mark.asyncio
    async def test_delete_other_users_category_not_found(
        self, test_db, test_user, other_user_category
    ):
        service = CategoryService(test_db)

        with pytest.raises(CategoryNotFoundError):
            await service.delete_category(other_user_category.id, test_user.id)

    @pytest.mark.asyncio
    async def test_requires_user(self):
        db = AsyncMock()
        service = CategoryService(db)

        with pytest.raises(UnauthorizedError):
            await service.get_categories_list(None)
        with pytest.raises(UnauthorizedError):
            await service.delete_category(uuid.uuid4(), None)

        db.execute.assert_not_called()

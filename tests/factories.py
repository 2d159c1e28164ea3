"""
Test data factories for generating test objects.

This module provides Factory Boy factories for creating test data objects
with realistic default values and easy customization. Tests build instances
with ``.build()`` and add them to the async session themselves.
"""

import uuid
from datetime import timedelta

import factory
from factory.alchemy import SQLAlchemyModelFactory

from models import Category, Tag, Todo, TodoPriority, TodoStatus, User, utcnow


class UserFactory(SQLAlchemyModelFactory):
    """Factory for creating User test instances."""

    class Meta:
        model = User
        sqlalchemy_session = None  # Will be set at runtime
        sqlalchemy_session_persistence = "commit"

    id = factory.LazyFunction(uuid.uuid4)
    external_id = factory.LazyFunction(lambda: f"idp|{uuid.uuid4()}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    is_active = True


class CategoryFactory(SQLAlchemyModelFactory):
    """Factory for creating Category test instances."""

    class Meta:
        model = Category
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"Category {n}")
    color = "#3b82f6"
    icon = None
    # user_id will be passed when creating the category


class TagFactory(SQLAlchemyModelFactory):
    """Factory for creating Tag test instances."""

    class Meta:
        model = Tag
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"tag-{n}")
    color = "#6b7280"


class TodoFactory(SQLAlchemyModelFactory):
    """Factory for creating Todo test instances."""

    class Meta:
        model = Todo
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"

    id = factory.LazyFunction(uuid.uuid4)
    title = factory.Faker("sentence", nb_words=4, variable_nb_words=True)
    description = factory.Faker("text", max_nb_chars=200)
    status = TodoStatus.PENDING.value
    priority = TodoPriority.MEDIUM.value
    due_date = factory.LazyFunction(lambda: utcnow() + timedelta(days=7))
    completed_at = None
    # user_id, category_id will be passed when creating

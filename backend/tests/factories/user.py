"""Factory Boy definition for :class:`resumeai.models.user.User`."""

from __future__ import annotations

import factory

from resumeai.models.user import User
from tests.factories import BaseFactory
from tests.helpers.auth import DEFAULT_PASSWORD, FAST_HASHER


class UserFactory(BaseFactory):
    """
    Build persisted :class:`resumeai.models.user.User` instances.

    Notes
    -----
    - Passwords are hashed with the cheap test hasher from ``tests.helpers.auth``.
    - Pass ``password=...`` to choose the raw password (default ``Aa1!aaaa``).
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    role = "user"
    is_active = True
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password through the model API (ensures hashing)."""
        obj.set_password(extracted or DEFAULT_PASSWORD, hasher=FAST_HASHER)

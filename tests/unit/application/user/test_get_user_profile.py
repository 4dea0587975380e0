"""Tests for get user profile query."""

import pytest

from virgin_initiatives.application.user.queries.get_user_profile import (
    FriendSummary,
    GetUserProfileQuery,
    PublicProfile,
)
from virgin_initiatives.domain.user.core.exceptions.user_errors import UserNotFoundError
from virgin_initiatives.infrastructure.user.in_memory_user_store import InMemoryUserStore


@pytest.fixture
def store(user_factory, participations):
    store = InMemoryUserStore()
    store.add(user_factory(1, "jane@virgin.com", participations=participations, friends=[3, 2]))
    store.add(user_factory(2, "sam@virgin.com"))
    store.add(user_factory(3, "alex@virgin.com"))
    return store


@pytest.fixture
def query(store):
    return GetUserProfileQuery(store)


@pytest.mark.asyncio
async def test_by_id_returns_public_profile(query, participations):
    profile = await query.by_id(1)

    assert isinstance(profile, PublicProfile)
    assert profile.email == "jane@virgin.com"
    assert profile.points == 100
    assert profile.participated_initiatives == tuple(participations)
    assert not hasattr(profile, "password_hash")


@pytest.mark.asyncio
async def test_by_id_not_found(query):
    assert await query.by_id(99) is None


@pytest.mark.asyncio
async def test_friends_of_follows_store_order(query):
    friends = await query.friends_of("jane@virgin.com")

    assert friends == [
        FriendSummary(id=2, email="sam@virgin.com", points=0),
        FriendSummary(id=3, email="alex@virgin.com", points=0),
    ]


@pytest.mark.asyncio
async def test_friends_of_user_without_friends(query):
    assert await query.friends_of("sam@virgin.com") == []


@pytest.mark.asyncio
async def test_friends_of_unknown_user(query):
    with pytest.raises(UserNotFoundError):
        await query.friends_of("nobody@virgin.com")


@pytest.mark.asyncio
async def test_friends_of_invalid_email(query):
    with pytest.raises(ValueError):
        await query.friends_of("not-an-email")

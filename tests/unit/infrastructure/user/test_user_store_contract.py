"""Behaviour shared by the local IUserStore implementations."""

import json

import pytest

from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    UserAlreadyExistsError,
    UserNotFoundError,
)
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.profile_patch import ProfilePatch
from virgin_initiatives.infrastructure.user.in_memory_user_store import InMemoryUserStore
from virgin_initiatives.infrastructure.user.json_file_user_store import JsonFileUserStore

JANE = Email("jane@virgin.com")
SAM = Email("sam@virgin.com")


@pytest.fixture(params=["inmemory", "json"])
def store(request, tmp_path):
    if request.param == "json":
        return JsonFileUserStore(tmp_path / "users.json")
    return InMemoryUserStore()


@pytest.mark.asyncio
async def test_create_assigns_sequential_ids(store):
    jane = await store.create(JANE, "s3cret")
    sam = await store.create(SAM, "other", user_type="customer")

    assert (jane.id, sam.id) == (1, 2)
    assert sam.user_type == "customer"
    assert [u.email for u in await store.list_users()] == [JANE, SAM]


@pytest.mark.asyncio
async def test_create_duplicate_email_raises(store):
    await store.create(JANE, "s3cret")

    with pytest.raises(UserAlreadyExistsError):
        await store.create(JANE, "another")


@pytest.mark.asyncio
async def test_email_lookup_is_case_sensitive(store):
    await store.create(JANE, "s3cret")

    assert await store.find_by_email(Email("Jane@virgin.com")) is None
    assert (await store.find_by_email(JANE)).id == 1


@pytest.mark.asyncio
async def test_find_by_id(store):
    await store.create(JANE, "s3cret")

    assert (await store.find_by_id(1)).email == JANE
    assert await store.find_by_id(2) is None


@pytest.mark.asyncio
async def test_verify_credentials(store):
    await store.create(JANE, "s3cret")

    assert (await store.verify_credentials(JANE, "s3cret")).email == JANE
    assert await store.verify_credentials(JANE, "wrong") is None
    assert await store.verify_credentials(SAM, "s3cret") is None


@pytest.mark.asyncio
async def test_update_profile_persists(store):
    await store.create(JANE, "s3cret")

    updated = await store.update_profile(JANE, ProfilePatch(first_name="Jane", password="n3w"))

    assert updated.first_name == "Jane"
    reloaded = await store.find_by_email(JANE)
    assert reloaded.first_name == "Jane"
    assert reloaded.verify_password("n3w") is True
    assert reloaded.verify_password("s3cret") is False


@pytest.mark.asyncio
async def test_update_unknown_user_raises(store):
    with pytest.raises(UserNotFoundError):
        await store.update_profile(JANE, ProfilePatch(first_name="Jane"))


@pytest.mark.asyncio
async def test_list_friends_unknown_user_raises(store):
    with pytest.raises(UserNotFoundError):
        await store.list_friends(JANE)


@pytest.mark.asyncio
async def test_list_friends_without_friends(store):
    await store.create(JANE, "s3cret")

    assert await store.list_friends(JANE) == []


@pytest.fixture(params=["inmemory", "json"])
def store_with_friends(request, tmp_path, user_factory):
    """Jane lists friends [3, 2, 2, 99]; users 2 and 3 exist, 99 does not."""
    records = [
        {"id": 1, "email": "jane@virgin.com", "friends": [3, 2, 2, 99]},
        {"id": 2, "email": "sam@virgin.com"},
        {"id": 3, "email": "alex@virgin.com"},
    ]
    if request.param == "json":
        path = tmp_path / "users.json"
        path.write_text(json.dumps({"users": records}), encoding="utf-8")
        return JsonFileUserStore(path)

    store = InMemoryUserStore()
    for record in records:
        store.add(user_factory(record["id"], record["email"], friends=record.get("friends", ())))
    return store


@pytest.mark.asyncio
async def test_list_friends_store_order_without_duplicates(store_with_friends):
    friends = await store_with_friends.list_friends(JANE)

    assert [f.id for f in friends] == [2, 3]

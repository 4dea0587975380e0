"""REST API for the users service.

Routes mirror the client's expectations:

- GET  /users                 list users (no credential material)
- POST /users                 signup, or profile update with ``isUpdate``
- POST /users/login           server-side credential check
- GET  /users/friends?email=  friend leaderboard rows
- GET  /users/{user_id}       public profile

Error responses are rendered as ``{"success": false, "message": ...}`` by
the handlers registered in ``api.app``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from pydantic import BaseModel, ConfigDict

from virgin_initiatives.application.user.queries.get_user_profile import (
    GetUserProfileQuery,
)
from virgin_initiatives.domain.shared.ports.event_bus import IEventBus
from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    InvalidProfilePatchError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.profile_patch import ProfilePatch
from virgin_initiatives.infrastructure.user.mappers import (
    participation_to_record,
    user_to_public_record,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

# Keys of a POST /users body that are not part of a profile patch
_UPDATE_CONTROL_KEYS = {"email", "isUpdate"}


class ParticipationModel(BaseModel):
    initiativeId: int
    dateParticipated: str = ""
    pointsEarned: int = 0
    contribution: str = ""


class PublicUserModel(BaseModel):
    """A user as served to any client. Never carries credentials."""

    id: int
    email: str
    points: int = 0
    friends: List[int] = []
    participatedInitiatives: List[ParticipationModel] = []
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    userType: Optional[str] = None


class SafeUserModel(BaseModel):
    id: int
    email: str
    points: int
    participatedInitiatives: List[ParticipationModel] = []


class FriendModel(BaseModel):
    id: int
    email: str
    points: int


class UserListResponse(BaseModel):
    users: List[PublicUserModel]


class UserWriteResponse(BaseModel):
    success: bool
    message: str
    user: Optional[PublicUserModel] = None


class LoginResponse(BaseModel):
    success: bool
    user: PublicUserModel


class FriendsResponse(BaseModel):
    success: bool
    friends: List[FriendModel]


class SafeUserResponse(BaseModel):
    success: bool
    user: SafeUserModel


class UserWriteRequest(BaseModel):
    """Signup body, or a profile patch when isUpdate is true.

    Extra keys are kept so that an unknown patch field is rejected with
    400 instead of silently dropped.
    """

    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    password: Optional[str] = None
    isUpdate: bool = False
    userType: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


def get_store(request: Request) -> IUserStore:
    """Store dependency, set on app state by create_app()."""
    return request.app.state.user_store


def get_event_bus(request: Request) -> IEventBus:
    return request.app.state.event_bus


def _email_or_400(value: Optional[str]) -> Email:
    try:
        return Email(value)  # type: ignore[arg-type]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


async def _publish(event_bus: IEventBus, user: User) -> None:
    for event in user.collect_events():
        await event_bus.publish(event)


@router.get("", response_model=UserListResponse, response_model_exclude_none=True)
async def list_users(store: IUserStore = Depends(get_store)) -> Dict[str, Any]:
    users = await store.list_users()
    return {"users": [user_to_public_record(user) for user in users]}


@router.post("", response_model=UserWriteResponse, response_model_exclude_none=True)
async def write_user(
    body: UserWriteRequest,
    store: IUserStore = Depends(get_store),
    event_bus: IEventBus = Depends(get_event_bus),
) -> Dict[str, Any]:
    """Create a user, or update a profile when ``isUpdate`` is true.

    Signup:
        400 when email or password is missing, 409 on a duplicate email.

    Update:
        The body minus ``email`` and ``isUpdate`` is the profile patch.
        400 on an invalid patch, 404 when the user does not exist.
    """
    if body.isUpdate:
        return await _update_profile(body, store, event_bus)

    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    email = _email_or_400(body.email)
    try:
        user = await store.create(email, body.password, body.userType)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail="User already exists") from e

    logger.info("Signup via API", extra={"user_id": user.id})
    await _publish(event_bus, user)
    return {
        "success": True,
        "message": "User created successfully",
        "user": user_to_public_record(user),
    }


async def _update_profile(
    body: UserWriteRequest, store: IUserStore, event_bus: IEventBus
) -> Dict[str, Any]:
    if not body.email:
        raise HTTPException(status_code=400, detail="Email is required")
    email = _email_or_400(body.email)

    fields = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if key not in _UPDATE_CONTROL_KEYS
    }
    try:
        patch = ProfilePatch.from_mapping(fields)
    except InvalidProfilePatchError as e:
        raise HTTPException(status_code=400, detail=e.reason) from e

    try:
        user = await store.update_profile(email, patch)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail="User not found") from e

    await _publish(event_bus, user)
    return {
        "success": True,
        "message": "User updated successfully",
        "user": user_to_public_record(user),
    }


@router.post("/login", response_model=LoginResponse, response_model_exclude_none=True)
async def login(
    body: LoginRequest,
    store: IUserStore = Depends(get_store),
    event_bus: IEventBus = Depends(get_event_bus),
) -> Dict[str, Any]:
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = await store.verify_credentials(_email_or_400(body.email), body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    await _publish(event_bus, user)
    return {"success": True, "user": user_to_public_record(user)}


@router.get("/friends", response_model=FriendsResponse)
async def list_friends(
    email: Optional[str] = Query(None, description="Email of the user"),
    store: IUserStore = Depends(get_store),
) -> Dict[str, Any]:
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    query = GetUserProfileQuery(store)
    try:
        friends = await query.friends_of(email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail="User not found") from e

    return {
        "success": True,
        "friends": [{"id": f.id, "email": f.email, "points": f.points} for f in friends],
    }


@router.get("/{user_id}", response_model=SafeUserResponse)
async def get_user(
    user_id: int = Path(..., description="Store-assigned user id"),
    store: IUserStore = Depends(get_store),
) -> Dict[str, Any]:
    profile = await GetUserProfileQuery(store).by_id(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")

    return {
        "success": True,
        "user": {
            "id": profile.id,
            "email": profile.email,
            "points": profile.points,
            "participatedInitiatives": [
                participation_to_record(p) for p in profile.participated_initiatives
            ],
        },
    }

"""Mapping between User entities and their JSON records.

The record shape is the one stored in ``users.json`` and served by the
users API (camelCase keys). Public records never carry credentials.
"""

from typing import Any, Dict, Mapping

from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.participation_record import (
    ParticipationRecord,
)
from virgin_initiatives.domain.user.core.value_objects.password_hash import PasswordHash

_DISPLAY_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "company": "company",
    "position": "position",
    "userType": "user_type",
}


def participation_from_record(data: Mapping[str, Any]) -> ParticipationRecord:
    """Build a ParticipationRecord from its camelCase record.

    Raises:
        ValueError: On missing keys or invalid values
    """
    try:
        return ParticipationRecord(
            initiative_id=data["initiativeId"],
            date_participated=str(data.get("dateParticipated", "")),
            points_earned=data.get("pointsEarned", 0),
            contribution=str(data.get("contribution", "")),
        )
    except KeyError as e:
        raise ValueError(f"Participation record missing {e.args[0]}") from e


def participation_to_record(record: ParticipationRecord) -> Dict[str, Any]:
    return {
        "initiativeId": record.initiative_id,
        "dateParticipated": record.date_participated,
        "pointsEarned": record.points_earned,
        "contribution": record.contribution,
    }


def user_from_record(data: Mapping[str, Any]) -> User:
    """Build a User from a stored or served record.

    A legacy plaintext ``password`` field is hashed on load; the store
    writes ``passwordHash`` back on its next save. Public records (no
    credential keys) produce a user without a password hash.

    Raises:
        ValueError: On missing/invalid fields
    """
    if not isinstance(data, Mapping):
        raise ValueError("User record must be an object")

    try:
        user_id = data["id"]
        email = Email(data["email"])
    except KeyError as e:
        raise ValueError(f"User record missing {e.args[0]}") from e

    password_hash = None
    if data.get("passwordHash"):
        password_hash = PasswordHash(data["passwordHash"])
    elif data.get("password"):
        password_hash = PasswordHash.from_plaintext(data["password"])

    participations = data.get("participatedInitiatives") or []
    friends = data.get("friends") or []
    if not isinstance(participations, list) or not isinstance(friends, list):
        raise ValueError("participatedInitiatives and friends must be lists")

    display = {attr: data.get(key) for key, attr in _DISPLAY_FIELDS.items()}

    return User(
        id=user_id,
        email=email,
        password_hash=password_hash,
        points=data.get("points", 0),
        participated_initiatives=[participation_from_record(p) for p in participations],
        friends=[int(f) for f in friends],
        **display,
    )


def user_to_public_record(user: User) -> Dict[str, Any]:
    """Record without credential material, absent display fields omitted."""
    record: Dict[str, Any] = {
        "id": user.id,
        "email": user.email.value,
        "points": user.points,
        "friends": list(user.friends),
        "participatedInitiatives": [
            participation_to_record(p) for p in user.participated_initiatives
        ],
    }
    for key, attr in _DISPLAY_FIELDS.items():
        value = getattr(user, attr)
        if value is not None:
            record[key] = value
    return record


def user_to_record(user: User) -> Dict[str, Any]:
    """Full stored record including the password hash."""
    record = user_to_public_record(user)
    if user.password_hash is not None:
        record["passwordHash"] = user.password_hash.value
    return record

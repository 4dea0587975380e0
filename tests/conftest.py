"""Shared test fixtures.

Catalog text, parsed catalogs and user builders used across the unit and
integration suites. Nothing here touches the network or the real data/
directory.
"""

from typing import Callable, Iterable, Optional

import pytest

from virgin_initiatives.config import reset_settings
from virgin_initiatives.domain.initiative.core.entities.catalog import InitiativeCatalog
from virgin_initiatives.domain.initiative.parsing.catalog_parser import parse_catalog
from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.participation_record import (
    ParticipationRecord,
)
from virgin_initiatives.infrastructure.user.store_factory import reset_user_store

# Four records: ids 1..4. Record 2 has a quoted comma and two links.
CATALOG_TEXT = (
    "Company,Initiative,Challenge,Solution,Call to Action,Links\n"
    "Acme,Tree Planting,Deforestation,Plant trees,Join us,https://acme.example/trees\n"
    'Acme,Beach Cleanup,Plastic,"Clean, sort, recycle",Volunteer,'
    '"https://acme.example/beach\nhttps://acme.example/plastic"\n'
    "Globex,Solar Roofs,Energy use,Install panels,Go solar,\n"
    "Acme,Tree Planting,Deforestation,Plant more trees,Join again,https://acme.example/trees2\n"
)

UserFactory = Callable[..., User]


@pytest.fixture(autouse=True)
def _reset_singletons() -> Iterable[None]:
    """Keep settings and store singletons from leaking between tests."""
    reset_settings()
    reset_user_store()
    yield
    reset_settings()
    reset_user_store()


@pytest.fixture
def catalog_text() -> str:
    return CATALOG_TEXT


@pytest.fixture
def catalog() -> InitiativeCatalog:
    return parse_catalog(CATALOG_TEXT)


@pytest.fixture
def user_factory() -> UserFactory:
    """Build users with a real password hash and optional participations.

    Events from User.create are drained so tests only see their own.
    """

    def _build(
        user_id: int = 1,
        email: str = "jane@virgin.com",
        password: str = "s3cret",
        participations: Iterable[ParticipationRecord] = (),
        friends: Iterable[int] = (),
        first_name: Optional[str] = None,
    ) -> User:
        user = User.create(user_id, Email(email), password)
        for record in participations:
            user.record_participation(record)
        user.friends.extend(friends)
        user.first_name = first_name
        user.collect_events()
        return user

    return _build


@pytest.fixture
def participations() -> list:
    """Participations worth 100 points: ids 1, 2 and a repeat of 1."""
    return [
        ParticipationRecord(1, "2024-03-12", 50, "Planted 20 trees"),
        ParticipationRecord(2, "2024-04-02", 30, "Collected plastic"),
        ParticipationRecord(1, "2024-05-01", 20, "Planted 8 trees"),
    ]

"""Unit tests for User value objects."""

import pytest

from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    InvalidProfilePatchError,
)
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.participation_record import (
    ParticipationRecord,
)
from virgin_initiatives.domain.user.core.value_objects.password_hash import PasswordHash
from virgin_initiatives.domain.user.core.value_objects.profile_patch import (
    MAX_FIELD_LENGTH,
    ProfilePatch,
)


class TestEmail:
    """Test Email value object."""

    def test_valid_email(self):
        email = Email("jane@virgin.com")

        assert email.value == "jane@virgin.com"
        assert email.domain == "virgin.com"
        assert str(email) == "jane@virgin.com"

    @pytest.mark.parametrize("bad", ["", "   ", "no-at-sign", " jane@virgin.com", None])
    def test_invalid_email_raises(self, bad):
        with pytest.raises(ValueError):
            Email(bad)  # type: ignore[arg-type]

    def test_too_long_raises(self):
        with pytest.raises(ValueError, match="too long"):
            Email("a" * 250 + "@x.io")

    def test_matching_is_case_sensitive(self):
        assert Email("Jane@virgin.com") != Email("jane@virgin.com")


class TestPasswordHash:
    """Test PasswordHash value object."""

    def test_from_plaintext_verifies(self):
        hashed = PasswordHash.from_plaintext("s3cret")

        assert hashed.verify("s3cret") is True
        assert hashed.verify("s3cret ") is False

    def test_same_password_gets_fresh_salt(self):
        assert PasswordHash.from_plaintext("s3cret") != PasswordHash.from_plaintext("s3cret")

    def test_empty_plaintext_raises(self):
        with pytest.raises(ValueError):
            PasswordHash.from_plaintext("")

    def test_invalid_format_raises(self):
        with pytest.raises(ValueError, match="Invalid password hash"):
            PasswordHash("plaintext")

    def test_verify_non_string_is_false(self):
        assert PasswordHash.from_plaintext("s3cret").verify(None) is False  # type: ignore[arg-type]

    def test_repr_is_masked(self):
        hashed = PasswordHash.from_plaintext("s3cret")

        assert hashed.value not in repr(hashed)


class TestParticipationRecord:
    """Test ParticipationRecord value object."""

    def test_valid_record(self):
        record = ParticipationRecord(3, "2024-03-15", 150, "Planted 10 trees")

        assert record.catalog_index == 2
        assert record.contribution == "Planted 10 trees"

    def test_contribution_defaults_to_empty(self):
        assert ParticipationRecord(1, "2024-03-15", 0).contribution == ""

    @pytest.mark.parametrize("initiative_id", [0, -3, "1", True])
    def test_invalid_initiative_id_raises(self, initiative_id):
        with pytest.raises(ValueError, match="initiative_id"):
            ParticipationRecord(initiative_id, "2024-03-15", 10)

    def test_negative_points_raises(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            ParticipationRecord(1, "2024-03-15", -1)


class TestProfilePatch:
    """Test ProfilePatch value object."""

    def test_from_mapping_accepts_camel_case_aliases(self):
        patch = ProfilePatch.from_mapping({"firstName": "Jane", "lastName": "Doe"})

        assert patch.first_name == "Jane"
        assert patch.last_name == "Doe"
        assert patch.changed_fields() == ["first_name", "last_name"]

    def test_from_mapping_accepts_snake_case(self):
        patch = ProfilePatch.from_mapping({"company": "Virgin Red", "position": "Lead"})

        assert patch.display_fields() == {"company": "Virgin Red", "position": "Lead"}

    @pytest.mark.parametrize("key", ["email", "points", "id", "userType", "friends"])
    def test_from_mapping_rejects_immutable_keys(self, key):
        with pytest.raises(InvalidProfilePatchError, match="cannot be updated"):
            ProfilePatch.from_mapping({key: "x"})

    def test_empty_patch_rejected(self):
        with pytest.raises(InvalidProfilePatchError, match="empty"):
            ProfilePatch.from_mapping({})

    def test_all_none_patch_rejected(self):
        with pytest.raises(InvalidProfilePatchError, match="empty"):
            ProfilePatch.from_mapping({"firstName": None})

    def test_empty_password_rejected(self):
        with pytest.raises(InvalidProfilePatchError, match="password"):
            ProfilePatch(password="")

    def test_non_string_rejected(self):
        with pytest.raises(InvalidProfilePatchError, match="must be a string"):
            ProfilePatch(company=42)  # type: ignore[arg-type]

    def test_too_long_rejected(self):
        with pytest.raises(InvalidProfilePatchError, match="too long"):
            ProfilePatch(position="x" * (MAX_FIELD_LENGTH + 1))

    def test_display_fields_exclude_password(self):
        patch = ProfilePatch(first_name="Jane", password="n3w")

        assert patch.display_fields() == {"first_name": "Jane"}

    def test_repr_masks_password(self):
        patch = ProfilePatch(first_name="Jane", password="n3w-secret")

        assert "n3w-secret" not in repr(patch)
        assert "Jane" in repr(patch)

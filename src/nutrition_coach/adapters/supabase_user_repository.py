"""Supabase-backed user and profile repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_coach.domain.models import ProfileRecord, UserRecord
from nutrition_coach.domain.profile import UserProfileInput
from nutrition_coach.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for users and onboarding profiles."""

    client: Client

    def get_by_auth_id(self, auth_user_id: str) -> UserRecord | None:
        """Return the user for an authenticated identity, if present."""
        response = (
            self.client.table("users")
            .select("id, auth_user_id, timezone, last_active_at")
            .eq("auth_user_id", auth_user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None

    def create_user(self, auth_user_id: str) -> UserRecord:
        """Create a new user row and return it."""
        response = (
            self.client.table("users")
            .insert({"auth_user_id": auth_user_id, "timezone": "UTC"})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last_active_at timestamp for a user."""
        self.client.table("users").update(
            {"last_active_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(user_id)).execute()

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Update the user's timezone."""
        self.client.table("users").update({"timezone": timezone}).eq(
            "id", str(user_id)
        ).execute()

    def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Return the stored onboarding profile."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def save_profile(self, user_id: UUID, profile: UserProfileInput) -> ProfileRecord:
        """Insert or overwrite the user's profile."""
        payload = {
            **profile.to_dict(),
            "user_id": str(user_id),
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        response = (
            self.client.table("profiles")
            .upsert(payload, on_conflict="user_id")
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile in Supabase")
        return _parse_profile(response.data[0])


def _parse_user(row: dict[str, object]) -> UserRecord:
    last_active_raw = row.get("last_active_at")
    return UserRecord(
        id=UUID(str(row["id"])),
        auth_user_id=str(row["auth_user_id"]),
        timezone=str(row.get("timezone") or "UTC"),
        last_active_at=datetime.fromisoformat(last_active_raw)
        if isinstance(last_active_raw, str) and last_active_raw
        else None,
    )


def _parse_profile(row: dict[str, object]) -> ProfileRecord:
    updated_raw = row.get("updated_at")
    return ProfileRecord(
        user_id=UUID(str(row["user_id"])),
        profile=UserProfileInput.from_dict(row),
        updated_at=datetime.fromisoformat(updated_raw)
        if isinstance(updated_raw, str) and updated_raw
        else None,
    )

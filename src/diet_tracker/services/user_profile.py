"""User profile and weight history service."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from diet_tracker.domain.body import UserProfile, WeightEntry
from diet_tracker.services.key_value import KeyValueStore

USER_PROFILE_KEY = "user_profile"
WEIGHT_ENTRIES_KEY = "weight_entries"


@dataclass
class UserProfileService:
    """Service for the single local user's profile and weigh-ins."""

    store: KeyValueStore

    def get_profile(self) -> UserProfile | None:
        """Return the saved profile, or None before onboarding."""
        stored = self.store.get(USER_PROFILE_KEY)
        if not isinstance(stored, dict):
            return None
        return UserProfile.model_validate(stored)

    def save_profile(self, profile: UserProfile) -> UserProfile:
        """Replace the stored profile."""
        self.store.set(USER_PROFILE_KEY, profile.model_dump(mode="json"))
        return profile

    def add_weight_entry(self, entry: WeightEntry) -> WeightEntry:
        """Append a weigh-in."""
        entries = self.weight_entries()
        entries.append(entry)
        self._write_weights(entries)
        return entry

    def weight_entries(self) -> list[WeightEntry]:
        """Return all weigh-ins in insertion order."""
        stored = self.store.get(WEIGHT_ENTRIES_KEY)
        if not isinstance(stored, list):
            return []
        return [WeightEntry.model_validate(item) for item in stored]

    def weight_entries_in_range(self, start: date, end: date) -> list[WeightEntry]:
        """Return weigh-ins recorded between two calendar days, inclusive."""
        return [
            entry
            for entry in self.weight_entries()
            if start <= entry.recorded_at.date() <= end
        ]

    def latest_weight_entry(self) -> WeightEntry | None:
        """Return the most recent weigh-in."""
        entries = self.weight_entries()
        if not entries:
            return None
        return max(entries, key=lambda entry: entry.recorded_at)

    def delete_weight_entry(self, entry_id: UUID) -> bool:
        """Delete a weigh-in; returns False when nothing was removed."""
        entries = self.weight_entries()
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self._write_weights(remaining)
        return True

    def weight_change_since(self, start: datetime) -> float | None:
        """Latest weight minus the first weigh-in at or after ``start``.

        Positive values mean weight was gained. Returns None when there is no
        weigh-in in the period.
        """
        entries = sorted(self.weight_entries(), key=lambda entry: entry.recorded_at)
        since = [entry for entry in entries if entry.recorded_at >= start]
        if not since:
            return None
        return entries[-1].weight_kg - since[0].weight_kg

    def _write_weights(self, entries: list[WeightEntry]) -> None:
        self.store.set(
            WEIGHT_ENTRIES_KEY, [entry.model_dump(mode="json") for entry in entries]
        )

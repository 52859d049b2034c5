"""Preference repository protocol."""

from typing import Protocol, Optional


class PreferenceRepository(Protocol):
    """Key/value store for user preferences such as the last export filter."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store or overwrite a value."""
        ...

"""Session state container for taskcat runtime."""

from dataclasses import dataclass

from taskcat.errors import UsageError
from taskcat.models import Profile
from taskcat.store import TaskStore


@dataclass
class Session:
    """In-memory runtime state for a taskcat session."""

    profile_path: str | None = None
    profile: Profile | None = None
    store: TaskStore | None = None
    dirty: bool = False

    def require_profile(self) -> Profile:
        """Return loaded profile or raise if missing."""
        if self.profile is None:
            raise UsageError("No profile loaded")
        return self.profile

    def require_store(self) -> TaskStore:
        """Return loaded task store or raise if missing."""
        if self.store is None:
            raise UsageError("No tasks loaded")
        return self.store

    def record_change(self, changed: bool) -> bool:
        """Set the dirty flag when a store operation reported a change."""
        if changed:
            self.dirty = True
        return changed

    def mark_saved(self) -> None:
        self.dirty = False

"""Connection profiles persisted as a JSON list."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from query_backend.domain.errors import StorageError
from query_backend.domain.models import ConnectionProfile

_PROFILES = TypeAdapter(list[ConnectionProfile])


class ConnectionStore:
    """Reads and writes ``connections.json``.

    Profiles are identified by name.  Empty passwords are not written.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[ConnectionProfile]:
        if not self.path.exists():
            return []
        try:
            return _PROFILES.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            raise StorageError(f"Failed to read {self.path}: {exc}") from exc

    def save(self, profiles: list[ConnectionProfile]) -> None:
        payload = [
            p.model_dump(exclude={"password"} if not p.password else None) for p in profiles
        ]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write connections file: {exc}") from exc
        logger.info("Saved {} connection profiles to {}", len(profiles), self.path)

    def upsert(self, profile: ConnectionProfile) -> list[ConnectionProfile]:
        """Replace the profile with the same name, or append it."""
        profiles = self.load()
        for i, existing in enumerate(profiles):
            if existing.name == profile.name:
                profiles[i] = profile
                break
        else:
            profiles.append(profile)
        self.save(profiles)
        return profiles

    def delete(self, name: str) -> list[ConnectionProfile]:
        profiles = [p for p in self.load() if p.name != name]
        self.save(profiles)
        return profiles

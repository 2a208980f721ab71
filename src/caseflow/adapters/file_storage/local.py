"""File storage on a local directory."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path

from caseflow.domain.errors import StorageReleaseError

log = getLogger(__name__)


class LocalFileStorage:
    """Stores files under ``root``; a file reference is a path relative to it."""

    def __init__(self, root: Path) -> None:
        self.root = root.expanduser().resolve()

    def path_for(self, file_ref: str) -> Path:
        candidate = (self.root / file_ref).resolve()
        if not candidate.is_relative_to(self.root):
            raise StorageReleaseError(file_ref, "reference points outside the storage root")
        return candidate

    def release(self, file_ref: str) -> None:
        path = self.path_for(file_ref)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageReleaseError(file_ref, str(exc)) from exc
        log.debug("Released %s", path)

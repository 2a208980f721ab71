"""Port for the external file store that holds uploaded document files."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FileStorage(Protocol):
    """Releases stored files by their opaque reference.

    Implementations raise ``StorageReleaseError`` on failure. A reference that no
    longer exists counts as released.
    """

    def release(self, file_ref: str) -> None: ...

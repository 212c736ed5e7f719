"""Media introspector protocol."""

from pathlib import Path
from typing import Protocol

from socialcut.domain.models import MediaMetadata


class MediaIntrospector(Protocol):
    """Protocol for extracting MediaMetadata from files."""

    def get_metadata(self, path: Path) -> MediaMetadata:
        """Probe a media file.

        Raises:
            MetadataUnavailableError: If the file cannot be probed.
        """
        ...

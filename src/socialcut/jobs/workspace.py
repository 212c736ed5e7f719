"""Per-job scratch directory removed on every exit path."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)

WORKSPACE_PREFIX = "socialcut_"


class JobWorkspace:
    """Scoped temporary directory for a job's intermediate files.

    Example:
        with JobWorkspace() as workspace:
            cell = workspace.path("cell_0.mp4")
            ...
        # directory and contents are gone here, on success or error
    """

    def __init__(self, parent: Path | None = None, prefix: str = WORKSPACE_PREFIX):
        self._parent = parent
        self._prefix = prefix
        self._root: Path | None = None

    @property
    def root(self) -> Path:
        if self._root is None:
            raise RuntimeError("Workspace is not active")
        return self._root

    def path(self, name: str) -> Path:
        """Path of a file inside the workspace."""
        return self.root / name

    def __enter__(self) -> JobWorkspace:
        if self._parent is not None:
            self._parent.mkdir(parents=True, exist_ok=True)
        self._root = Path(
            tempfile.mkdtemp(
                prefix=self._prefix,
                dir=str(self._parent) if self._parent is not None else None,
            )
        )
        logger.debug("Created workspace %s", self._root)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        """Remove the workspace directory and everything in it."""
        if self._root is None:
            return
        root, self._root = self._root, None

        try:
            shutil.rmtree(root)
        except OSError as e:
            logger.warning("Could not remove workspace %s: %s", root, e)
            return
        logger.debug("Removed workspace %s", root)

"""Git working copy around an export directory."""

import logging
import subprocess
from enum import Enum
from pathlib import Path
from typing import Optional

from .exceptions import VersionControlError

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "sqlobjectexport updated SQL objects"


class RepositoryState(Enum):
    NOT_INITIALIZED = "not_initialized"
    INITIALIZED = "initialized"
    COMMITTED = "committed"
    FAILED = "failed"


class GitRepository:
    """Runs git in ``directory``.

    ``initialize`` clones the remote or, when that fails, pulls. Errors there
    are logged only. ``commit_and_push`` runs add, commit and push and stops
    at the first failing step.
    """

    def __init__(self, directory: Path, remote: Optional[str] = None):
        self.directory = Path(directory)
        self.remote = remote
        self.state = RepositoryState.NOT_INITIALIZED

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        if not self.directory.is_dir():
            raise VersionControlError(f"git {args[0]} failed: {self.directory} is not a directory")
        cmd = ["git", *args]
        logger.debug(f"Running {' '.join(cmd)} in {self.directory}")
        try:
            return subprocess.run(
                cmd,
                cwd=self.directory,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise VersionControlError(f"git {args[0]} failed: {detail}") from e
        except FileNotFoundError as e:
            raise VersionControlError("git not found on PATH") from e

    def initialize(self) -> RepositoryState:
        """Clone the remote into the directory, falling back to a pull."""
        self.directory.mkdir(parents=True, exist_ok=True)
        if not self.remote:
            logger.info("No git remote configured; skipping clone")
            return self.state

        try:
            self._run("clone", self.remote, "./")
            logger.info(f"Cloned {self.remote} into {self.directory}")
            self.state = RepositoryState.INITIALIZED
            return self.state
        except VersionControlError as e:
            logger.warning(f"{e}; trying pull instead")

        try:
            self._run("pull")
            logger.info(f"Pulled latest changes into {self.directory}")
            self.state = RepositoryState.INITIALIZED
        except VersionControlError as e:
            logger.error(str(e))
            self.state = RepositoryState.FAILED
        return self.state

    def commit_and_push(self, message: str = COMMIT_MESSAGE) -> RepositoryState:
        """Stage everything, commit and push.

        Raises:
            VersionControlError: From the first step that fails; later steps
                are not attempted.
        """
        try:
            self._run("add", ".")
            self._run("commit", "-m", message)
            self._run("push")
        except VersionControlError:
            self.state = RepositoryState.FAILED
            raise
        self.state = RepositoryState.COMMITTED
        logger.info(f"Committed and pushed {self.directory}")
        return self.state

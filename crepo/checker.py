from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .backend import VersionControl
from .errors import RepoError
from .githelper import GitHelper
from .logger import describe
from .manager import CrepoManager
from .repo import Repo
from .types import ExitCode


class DirtyError(RepoError):
    action = "Unable to check"


class DirtyRepoError(DirtyError):
    def __str__(self) -> str:
        return f"{self.directory} is dirty."


@dataclass(frozen=True)
class RepoChecker(CrepoManager):
    git: VersionControl = GitHelper

    def check(self) -> ExitCode:
        return self._run(self._check)

    def _check(self) -> ExitCode:
        self.check_all()
        logger.info("All repos are clean")
        return 0

    @describe("Checking all repos", level="DEBUG", error_level="DEBUG")
    def check_all(self) -> None:
        self.repos.run_all(self.check_repo, error=DirtyError)

    def check_repo(self, repo: Repo) -> None:
        if not self.git.is_clean(repo.directory):
            raise DirtyRepoError(repo.directory, "uncommitted changes")

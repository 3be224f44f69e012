from dataclasses import dataclass

from .backend import VersionControl
from .errors import RepoError
from .githelper import GitHelper
from .logger import describe
from .manager import CrepoManager
from .repo import Repo


class SyncError(RepoError):
    action = "Unable to sync"


@dataclass(frozen=True)
class RepoSyncer(CrepoManager):
    git: VersionControl = GitHelper

    def sync(self) -> None:
        self._run(self._sync)

    @describe("Syncing all repos", level="INFO")
    def _sync(self) -> None:
        self.repos.run_all(self.sync_repo, error=SyncError)

    def sync_repo(self, repo: Repo) -> None:
        with describe(
            f"Syncing {repo.directory} at {repo.refspec!r}", level="DEBUG", error_level="DEBUG"
        ):
            self.git.clone(repo.source, repo.directory)
            revision = self.git.resolve_revision(repo.directory, repo.refspec)
            self.git.checkout(repo.directory, revision)

from collections.abc import Generator
import contextlib
from dataclasses import dataclass
import os
import re

from git import GitCommandError, GitError, InvalidGitRepositoryError, NoSuchPathError
from git import Repo as GitRepo

from .constants import DEFAULT_REMOTE_NAME
from .logger import describe
from .typed_path import Remote, WorkDir
from .types import Commit, Revision


@dataclass
class UnknownRevisionError(GitError):
    refspec: str

    def __str__(self) -> str:
        return f"{self.refspec!r} does not name a branch, tag or commit."


class GitHelper:
    @classmethod
    @contextlib.contextmanager
    def repo(cls, local: WorkDir) -> Generator[GitRepo]:
        # Convert to string explicitly to gitpython-developers/GitPython#2085
        # Closing releases the persistent `git cat-file` processes before the next repo.
        with GitRepo(os.fspath(local)) as repo:
            yield repo

    @classmethod
    def clone(cls, remote: Remote, local: WorkDir) -> None:
        with describe(f"Cloning {remote} into {local}", level="DEBUG", error_level="DEBUG"):
            GitRepo.clone_from(os.fspath(remote), os.fspath(local)).close()

    @classmethod
    def resolve_revision(cls, local: WorkDir, refspec: str) -> Revision:
        with cls.repo(local) as repo:
            commit = cls._rev_parse(repo, refspec)
            branch = next(
                (
                    head.name
                    for head in repo.heads
                    if head.name == refspec and head.commit.hexsha == commit.sha
                ),
                None,
            )
        return Revision(commit, branch)

    @classmethod
    def _rev_parse(cls, repo: GitRepo, refspec: str) -> Commit:
        # git decides the precedence between branches, tags and abbreviated hashes.
        for candidate in (refspec, f"{DEFAULT_REMOTE_NAME}/{refspec}"):
            with contextlib.suppress(GitCommandError):
                return Commit(repo.git.rev_parse("--verify", "--quiet", f"{candidate}^{{commit}}"))
        raise UnknownRevisionError(refspec)

    @classmethod
    def checkout(cls, local: WorkDir, revision: Revision) -> None:
        with (
            describe(f"Checking out {revision} in {local}", level="DEBUG", error_level="DEBUG"),
            cls.repo(local) as repo,
        ):
            if revision.branch is None:
                repo.git.checkout("--detach", revision.commit.sha)
            else:
                repo.heads[revision.branch].checkout()

    @classmethod
    def is_clean(cls, local: WorkDir) -> bool:
        with cls.repo(local) as repo:
            return not repo.is_dirty(untracked_files=True)

    @classmethod
    def commit(cls, local: WorkDir) -> Commit:
        with cls.repo(local) as repo:
            return Commit(repo.head.commit.hexsha)

    @classmethod
    def is_detached(cls, local: WorkDir) -> bool:
        with cls.repo(local) as repo:
            return repo.head.is_detached


def error_cause(e: Exception) -> str:
    """Summarise an exception in one line, preferring git's own complaint."""
    match e:
        case NoSuchPathError():
            return "no such directory."
        case InvalidGitRepositoryError():
            return "not a git repository."
        case GitCommandError(stderr=str(stderr)):
            found = re.search(r"stderr: '(.*)'", stderr, flags=re.DOTALL)
            if found is not None:
                lines = [line.strip() for line in found.group(1).splitlines() if line.strip()]
                if lines:
                    return lines[-1]
    message = str(e).strip()
    return message.splitlines()[0] if message else type(e).__name__

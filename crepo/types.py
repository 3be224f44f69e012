from dataclasses import dataclass
from typing import ClassVar

type ExitCode = int


@dataclass(frozen=True, slots=True)
class Commit:
    sha: str
    COMMIT_DISPLAY_LENGTH: ClassVar[int] = 7

    def __str__(self) -> str:
        return self.sha[: self.COMMIT_DISPLAY_LENGTH]


@dataclass(frozen=True, slots=True)
class Revision:
    commit: Commit
    # Set when the refspec names a local branch, which is checked out instead of detaching.
    branch: str | None = None

    def __str__(self) -> str:
        if self.branch is None:
            return str(self.commit)
        return f"{self.branch} ({self.commit})"

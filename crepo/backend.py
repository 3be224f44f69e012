from typing import Protocol

from .typed_path import Remote, WorkDir
from .types import ExitCode, Revision


class VersionControl(Protocol):
    """The operations crepo needs from a version-control engine."""

    def clone(self, remote: Remote, local: WorkDir) -> None: ...
    def resolve_revision(self, local: WorkDir, refspec: str) -> Revision: ...
    def checkout(self, local: WorkDir, revision: Revision) -> None: ...
    def is_clean(self, local: WorkDir) -> bool: ...


class CommandRunner(Protocol):
    """Runs a shell command in a directory with inherited stdout and stderr."""

    def run(self, command: str, cwd: WorkDir) -> ExitCode: ...

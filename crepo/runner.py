from dataclasses import dataclass

from .backend import CommandRunner
from .errors import CrepoError, RepoError
from .logger import describe
from .manager import CrepoManager
from .repo import Repo
from .shell import ShellHelper


class RunError(CrepoError): ...


class MissingCommandError(RunError):
    def __str__(self) -> str:
        return "Please provide a shell command to execute."


class CommandError(RepoError, RunError):
    action = "Error running command in"


def require_command(command: str) -> None:
    if not command.strip():
        raise MissingCommandError()


@dataclass(frozen=True)
class RepoRunner(CrepoManager):
    command: str
    shell: CommandRunner = ShellHelper

    def __post_init__(self) -> None:
        require_command(self.command)

    def run(self) -> None:
        self._run(self._run_all)

    def _run_all(self) -> None:
        self.repos.run_all(self.run_in, error=CommandError)

    def run_in(self, repo: Repo) -> None:
        with describe(
            f"Running {self.command!r} in {repo.directory}", level="DEBUG", error_level="DEBUG"
        ):
            returncode = self.shell.run(self.command, repo.directory)
        if returncode != 0:
            raise CommandError(repo.directory, self.exit_reason(returncode))

    @staticmethod
    def exit_reason(returncode: int) -> str:
        if returncode < 0:
            return f"terminated by signal {-returncode}"
        return f"exit status {returncode}"

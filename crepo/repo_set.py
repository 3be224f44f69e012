from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
import traceback
from typing import Self

from loguru import logger

from .config import CrepoConfig
from .errors import CrepoError, RepoError
from .githelper import error_cause
from .repo import Repo


@dataclass(frozen=True)
class RepoSet:
    repos: Sequence[Repo]

    @classmethod
    def from_config(cls, config: CrepoConfig) -> Self:
        return cls([Repo.from_config(repo_config) for repo_config in config])

    def __iter__(self) -> Iterator[Repo]:
        return iter(self.repos)

    def __len__(self) -> int:
        return len(self.repos)

    def run_all(self, step: Callable[[Repo], None], *, error: type[RepoError]) -> None:
        """Apply `step` to each repo in order, stopping at the first failure.

        Errors raised by crepo itself propagate unchanged; anything else is
        wrapped in `error` together with the directory of the failing repo.
        """
        for repo in self:
            try:
                step(repo)
            except CrepoError:
                raise
            except Exception as e:
                logger.debug(f"Threw {type(e)} in {repo.directory}!")
                logger.trace(traceback.format_exc())
                raise error(repo.directory, error_cause(e)) from e

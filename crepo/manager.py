from collections.abc import Callable
from dataclasses import dataclass
import functools

from .config import CrepoConfig
from .repo_set import RepoSet
from .validator import Validator


@dataclass(frozen=True)
class CrepoManager:
    config: CrepoConfig

    @functools.cached_property
    def repos(self) -> RepoSet:
        return RepoSet.from_config(self.config)

    def _run[T](self, main: Callable[[], T]) -> T:
        # Nothing is touched unless every repo is fully declared.
        Validator(self.config).check()
        return main()

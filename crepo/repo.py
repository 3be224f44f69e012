from dataclasses import dataclass
from typing import Self

from .config import RepoConfig
from .typed_path import Remote, WorkDir


@dataclass(frozen=True, kw_only=True)
class Repo:
    directory: WorkDir
    source: Remote
    refspec: str

    @classmethod
    def from_config(cls, config: RepoConfig) -> Self:
        return cls(directory=config.work_dir, source=config.source, refspec=config.refspec)

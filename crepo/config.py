from __future__ import annotations

from collections.abc import Iterator, Sequence
import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import yaml

from .typed_path import Remote, WorkDir, work_dir

if TYPE_CHECKING:
    from _typeshed import SupportsWrite


@dataclass(frozen=True, kw_only=True, slots=True)
class RepoConfig:
    """One declared repository. Missing fields are empty strings until validated."""

    directory: str = ""
    remote: str = ""
    refspec: str = ""

    @property
    def work_dir(self) -> WorkDir:
        return work_dir(self.directory)

    @property
    def source(self) -> Remote:
        return Remote(self.remote)

    @property
    def representation(self) -> dict[str, str]:
        return dataclasses.asdict(self)


@dataclass(frozen=True, slots=True)
class CrepoConfig:
    repos: Sequence[RepoConfig]

    def __iter__(self) -> Iterator[RepoConfig]:
        return iter(self.repos)

    def __len__(self) -> int:
        return len(self.repos)

    @property
    def representation(self) -> list[dict[str, Any]]:
        return [repo.representation for repo in self.repos]

    def dump(self, f: SupportsWrite[str]) -> None:
        f.write(yaml.safe_dump(self.representation, default_flow_style=False, sort_keys=False))

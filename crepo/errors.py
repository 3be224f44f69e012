from dataclasses import dataclass
from typing import ClassVar

from .typed_path import WorkDir


class CrepoError(Exception):
    """Base class of every error that ends a crepo command."""


@dataclass
class RepoError(CrepoError):
    """An error from one repository step, naming the directory it happened in."""

    directory: WorkDir
    cause: str
    action: ClassVar[str] = "Unable to process"

    def __str__(self) -> str:
        return f"{self.action} {self.directory}: {self.cause}"

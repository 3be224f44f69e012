from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import overload


@dataclass(frozen=True, slots=True)
class TypedPath:
    """A path tagged with whether it is relative or absolute and names a file or a directory."""

    path: Path

    def __init__(self, path: str | os.PathLike[str]) -> None:
        if type(self) is TypedPath:
            raise TypeError("TypedPath is abstract.")
        object.__setattr__(self, "path", Path(path))

    def exists(self) -> bool:
        return self.path.exists()

    def is_file(self) -> bool:
        return self.path.is_file()

    @property
    def canonical(self) -> str:
        # Lexical only: symlinks in the working tree are not followed.
        return os.path.normpath(self.path)

    def __fspath__(self) -> str:
        return os.fspath(self.path)

    def __str__(self) -> str:
        return repr(os.fspath(self.path))


@dataclass(frozen=True, slots=True, init=False)
class RelFile(TypedPath): ...


@dataclass(frozen=True, slots=True, init=False)
class AbsFile(TypedPath): ...


def _join[F: TypedPath, D: TypedPath](
    base: TypedPath, other: TypedPath, file_type: type[F], dir_type: type[D]
) -> F | D:
    match other:
        case RelFile():
            return file_type(base.path / other.path)
        case RelDir():
            return dir_type(base.path / other.path)
    raise TypeError(f"Cannot join {other} onto {base}.")


@dataclass(frozen=True, slots=True, init=False)
class RelDir(TypedPath):
    @overload
    def __truediv__(self, other: RelFile) -> RelFile: ...
    @overload
    def __truediv__(self, other: RelDir) -> RelDir: ...
    def __truediv__(self, other: TypedPath) -> TypedPath:
        return _join(self, other, RelFile, RelDir)


@dataclass(frozen=True, slots=True, init=False)
class AbsDir(TypedPath):
    @overload
    def __truediv__(self, other: RelFile) -> AbsFile: ...
    @overload
    def __truediv__(self, other: RelDir) -> AbsDir: ...
    def __truediv__(self, other: TypedPath) -> TypedPath:
        return _join(self, other, AbsFile, AbsDir)


type WorkDir = RelDir | AbsDir
type ConfigFile = RelFile | AbsFile


def work_dir(path: str | os.PathLike[str]) -> WorkDir:
    """Type a working-copy directory; relative paths are relative to the cwd."""
    return AbsDir(path) if os.path.isabs(path) else RelDir(path)


def config_file(path: str | os.PathLike[str]) -> ConfigFile:
    return AbsFile(path) if os.path.isabs(path) else RelFile(path)


@dataclass(frozen=True)
class Remote:
    """Anything `git clone` accepts: a URL or a local path."""

    repo: str

    def __fspath__(self) -> str:
        return self.repo

    def __str__(self) -> str:
        return repr(self.repo)

from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
import difflib
import os
from typing import NoReturn

from loguru import logger
import yaml
from yaml import MappingNode, MarkedYAMLError, Node, ScalarNode, SequenceNode, YAMLError
from yaml.error import Mark

from .config import CrepoConfig, RepoConfig
from .errors import CrepoError
from .logger import describe
from .typed_path import ConfigFile


@dataclass(frozen=True, slots=True)
class Context:
    filename: ConfigFile
    mark: Mark | None


@dataclass
class ConfigLoadError(CrepoError):
    filename: ConfigFile
    cause: OSError

    def __str__(self) -> str:
        reason = self.cause.strerror or type(self.cause).__name__
        return f"Unable to read config file {self.filename}: {reason}."


@dataclass
class ConfigParseError(YAMLError, CrepoError):
    msg: str
    context: Context

    @property
    def position(self) -> str:
        filename = os.fspath(self.context.filename)
        mark = self.context.mark
        if mark is None:
            return filename
        return f"{filename}:{mark.line + 1}:{mark.column + 1}"

    def __str__(self) -> str:
        return f"An unexpected error occurred during parsing @ {self.position}: {self.msg}"


NULL_TAG = "tag:yaml.org,2002:null"
SCALAR_TYPES: dict[str, str] = {
    "null": "null",
    "bool": "boolean",
    "int": "integer",
    "float": "float",
}


def type_of(node: Node) -> str:
    """Name the YAML type of `node` for error messages."""
    match node:
        case ScalarNode():
            scalar_type = SCALAR_TYPES.get(node.tag.rsplit(":", maxsplit=1)[-1])
            if scalar_type is not None:
                return scalar_type
            return "string" if node.value else "empty string"
        case SequenceNode():
            return "sequence"
        case MappingNode():
            return "mapping"
    return "unknown"


@dataclass
class Parser:
    filepath: ConfigFile
    _directories: dict[str, Node] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def fail(self, message: str, node: Node) -> NoReturn:
        raise ConfigParseError(message, Context(self.filepath, node.start_mark))

    def parse_mapping[T](
        self,
        node: Node,
        fields: Mapping[str, Callable[[Node], object]],
        build: Callable[..., T],
        *,
        name: str,
    ) -> T:
        if not isinstance(node, MappingNode):
            self.fail(f"expected {name} mapping, got {type_of(node)}.", node)
        values: dict[str, object] = {}
        for key_node, value_node in node.value:
            key = self.parse_key(key_node, options=fields.keys())
            if key in values:
                self.fail(f"duplicate key {key!r} in mapping.", key_node)
            values[key] = fields[key](value_node)
        # Absent keys keep their defaults and are reported by validation instead.
        return build(**values)

    def parse_sequence[T](self, node: Node, item: Callable[[Node], T], *, names: str) -> list[T]:
        if not isinstance(node, SequenceNode):
            self.fail(f"expected sequence of {names}, got {type_of(node)}.", node)
        return [item(child) for child in node.value]

    def parse_key(self, node: Node, options: Collection[str]) -> str:
        if not isinstance(node, ScalarNode) or node.tag == NULL_TAG:
            self.fail(f"expected a string as the key, got {type_of(node)}.", node)
        key: str = node.value
        if key in options:
            return key
        match difflib.get_close_matches(key, options, n=1):
            case [suggestion]:
                self.fail(f"invalid key {key!r}, did you mean {suggestion!r}?", node)
            case _:
                self.fail(f"mapping key should be one of {list(options)!r}, got {key!r}.", node)

    def parse_string(self, node: Node, *, name: str) -> str:
        if not isinstance(node, ScalarNode):
            self.fail(f"expected {name} as a string, got {type_of(node)}.", node)
        if node.tag == NULL_TAG:
            return ""
        # Scalars are kept as written so that refspecs such as 0123456 stay intact.
        return node.value

    def parse_directory(self, node: Node) -> str:
        return self.parse_string(node, name="directory")

    def parse_remote(self, node: Node) -> str:
        return self.parse_string(node, name="remote")

    def parse_refspec(self, node: Node) -> str:
        return self.parse_string(node, name="refspec")

    def _warn_duplicate_directory(self, repo_config: RepoConfig, node: Node) -> None:
        if not repo_config.directory:
            return
        canonical = repo_config.work_dir.canonical
        if canonical not in self._directories:
            self._directories[canonical] = node
            return
        mark = self._directories[canonical].start_mark
        where = "" if mark is None else f" (already used on line {mark.line + 1})"
        logger.warning(
            f"Duplicate directory {repo_config.work_dir}{where}; "
            "operations on it will run more than once."
        )

    def parse_repo_config(self, node: Node) -> RepoConfig:
        repo_config = self.parse_mapping(
            node,
            fields=dict(
                directory=self.parse_directory,
                remote=self.parse_remote,
                refspec=self.parse_refspec,
            ),
            build=RepoConfig,
            name="repo",
        )
        self._warn_duplicate_directory(repo_config, node)
        return repo_config

    def parse_crepo_config(self, node: Node | None) -> CrepoConfig:
        if node is None:
            # An empty file declares no repositories.
            return CrepoConfig([])
        return CrepoConfig(self.parse_sequence(node, self.parse_repo_config, names="repos"))

    def compose(self) -> Node | None:
        unpositioned = Context(self.filepath, None)
        try:
            with open(self.filepath, encoding="utf-8") as f:
                return yaml.compose(f, Loader=yaml.SafeLoader)
        except OSError as e:
            raise ConfigLoadError(self.filepath, e) from e
        except UnicodeDecodeError as e:
            raise ConfigParseError("file is not valid UTF-8.", unpositioned) from e
        except MarkedYAMLError as e:
            problem = e.problem or "malformed YAML"
            raise ConfigParseError(f"{problem}.", Context(self.filepath, e.problem_mark)) from e
        except YAMLError as e:
            raise ConfigParseError(f"{e}.", unpositioned) from e

    def parse(self) -> CrepoConfig:
        return self.parse_crepo_config(self.compose())

    @classmethod
    def parse_file(cls, filepath: ConfigFile) -> CrepoConfig:
        with describe(f"Parsing {filepath}", level="DEBUG"):
            return cls(filepath).parse()

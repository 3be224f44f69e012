from pathlib import Path
import sys
import textwrap

from loguru import logger
import pytest
from pytest import LogCaptureFixture, MonkeyPatch
import yaml
from yaml import Node

from .typed_path import AbsDir


@pytest.fixture
def typed_tmp_path(tmp_path: Path) -> AbsDir:
    return AbsDir(tmp_path)


@pytest.fixture
def in_tmp_path(typed_tmp_path: AbsDir, monkeypatch: MonkeyPatch) -> AbsDir:
    """Run the test from inside its temporary directory."""
    monkeypatch.chdir(typed_tmp_path)
    return typed_tmp_path


@pytest.fixture(autouse=True)
def log_everything() -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="TRACE",
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )


@pytest.fixture
def log_level() -> str:
    return "INFO"


@pytest.fixture
def log_cleanly(caplog: LogCaptureFixture, log_level: str) -> None:
    """Send bare messages at `log_level` and above to `caplog`."""
    logger.remove()
    logger.add(caplog.handler, level=log_level, colorize=False, format="{message}")


@pytest.fixture
def yaml_node(raw_yaml: str) -> Node:
    return yaml.compose(textwrap.dedent(raw_yaml).strip(), Loader=yaml.SafeLoader)

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import functools
import os
import sys
import traceback
from typing import Self

import click
from loguru import logger

from .checker import RepoChecker
from .config import CrepoConfig
from .config_parser import Parser
from .constants import CREPO_FILE
from .logger import setup_logger
from .runner import RepoRunner, require_command
from .syncer import RepoSyncer
from .typed_path import ConfigFile, config_file
from .types import ExitCode
from .validator import Validator


def check_for_errors[**P](fn: Callable[P, ExitCode | None]) -> Callable[P, None]:
    @functools.wraps(fn)
    def main(*args: P.args, **kwargs: P.kwargs) -> None:
        try:
            exitcode = fn(*args, **kwargs)
        except BaseException as e:
            logger.debug(f"Threw {type(e)}!")
            logger.trace(traceback.format_exc())
            logger.error(f"{type(e).__name__}: {e}")
            sys.exit(1)
        if exitcode is not None:
            sys.exit(exitcode)

    return main


@dataclass(frozen=True, slots=True)
class Settings:
    config_file: ConfigFile
    verbose: int = 0
    quiet: int = 0

    def override(self, config: str | None, verbose: int, quiet: int) -> Self:
        """Combine options given after a subcommand with those given before it."""
        return type(self)(
            config_file=self.config_file if config is None else config_file(config),
            verbose=self.verbose + verbose,
            quiet=self.quiet + quiet,
        )

    def setup_logger(self) -> None:
        setup_logger(self.quiet, self.verbose)

    def load_config(self) -> CrepoConfig:
        return Parser.parse_file(self.config_file)


def global_options[**P, R](fn: Callable[P, R]) -> Callable[P, R]:
    fn = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Display less output (repeat up to 3 times).",
        show_default=False,
    )(fn)
    fn = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Display more output (repeat up to 2 times).",
        show_default=False,
    )(fn)
    fn = click.option(
        "-c",
        "--config",
        default=None,
        metavar="FILE",
        help=f"Repository declaration file.  [default: {os.fspath(CREPO_FILE)}]",
    )(fn)
    return fn


def command_settings(settings: Settings, config: str | None, verbose: int, quiet: int) -> Settings:
    settings = settings.override(config, verbose, quiet)
    settings.setup_logger()
    return settings


@click.group(context_settings=dict(show_default=True))
@global_options
@click.pass_context
@check_for_errors
def main(ctx: click.Context, config: str | None, verbose: int, quiet: int) -> None:
    """Manage a collection of git repositories declared in a YAML file."""
    ctx.obj = command_settings(Settings(CREPO_FILE), config, verbose, quiet)


@main.command()
@global_options
@click.pass_obj
@check_for_errors
def init(settings: Settings, config: str | None, verbose: int, quiet: int) -> None:
    """Clone every declared repository and check out its refspec.

    \b
    Example:
    # Clone the repos listed in ./crepo.yaml.
    crepo init
    """
    settings = command_settings(settings, config, verbose, quiet)
    RepoSyncer(settings.load_config()).sync()


@main.command()
@global_options
@click.pass_obj
@check_for_errors
def check(settings: Settings, config: str | None, verbose: int, quiet: int) -> ExitCode:
    """Check that no declared repository has uncommitted changes.

    \b
    Example:
    # Fail if any repo in ./crepo.yaml is dirty.
    crepo check
    """
    settings = command_settings(settings, config, verbose, quiet)
    return RepoChecker(settings.load_config()).check()


@main.command(context_settings=dict(ignore_unknown_options=True, allow_interspersed_args=False))
@global_options
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
@check_for_errors
def foreach(
    settings: Settings, command: tuple[str, ...], config: str | None, verbose: int, quiet: int
) -> None:
    """Run a shell command in each declared repository, stopping at the first failure.

    \b
    Example:
    # Show the current commit of every repo.
    crepo foreach -- git rev-parse HEAD
    """
    settings = command_settings(settings, config, verbose, quiet)
    shell_command = " ".join(command)
    require_command(shell_command)
    RepoRunner(settings.load_config(), shell_command).run()


@main.command()
@global_options
@click.pass_obj
@check_for_errors
def validate(settings: Settings, config: str | None, verbose: int, quiet: int) -> None:
    """Check that every declared repository has a directory, remote and refspec.

    \b
    Example:
    # Validate a declaration kept elsewhere.
    crepo validate --config repos/crepo.yaml
    """
    settings = command_settings(settings, config, verbose, quiet)
    Validator(settings.load_config()).validate()

import os
from subprocess import Popen
import sys

from loguru import logger

from .typed_path import WorkDir
from .types import ExitCode


class ShellHelper:
    SHELL: tuple[str, ...] = ("sh", "-c")

    @classmethod
    def run(cls, command: str, cwd: WorkDir) -> ExitCode:
        args = [*cls.SHELL, command]
        logger.trace(f"Running: {args} in {cwd}")
        # Keep our own buffered output ahead of the child's.
        sys.stdout.flush()
        sys.stderr.flush()
        # stdin, stdout and stderr are inherited so output appears live.
        with Popen(args, cwd=os.fspath(cwd)) as process:
            returncode = process.wait()
        logger.trace(f"returncode = {returncode}")
        return returncode

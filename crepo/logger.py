import contextlib
from dataclasses import KW_ONLY, dataclass
import inspect
import sys
from types import TracebackType

from loguru import logger

from .constants import DONE_SUFFIX, FAILURE_SUFFIX, LOADING_SUFFIX

LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE")
DEFAULT_LEVEL: str = "INFO"


@dataclass(frozen=True)
class describe(contextlib.ContextDecorator):  # noqa: N801
    """Log `message ...` before a block and `[done]` or `[failed]` after it.

    Works both as a context manager and as a decorator. Failures are logged at
    `error_level` and the exception keeps propagating.
    """

    message: str
    _: KW_ONLY
    level: str = "TRACE"
    error_level: str = "ERROR"

    def _log(self, level: str, suffix: str) -> None:
        logger.opt(depth=self._caller_depth()).log(level, f"{self.message} {suffix}")

    @staticmethod
    def _caller_depth() -> int:
        # Attribute records to the code being described, not to this module or contextlib.
        internal = {__file__, contextlib.__file__}
        for depth, frameinfo in enumerate(inspect.stack()[1:]):
            if frameinfo.filename not in internal:
                return depth
        return 0

    def __enter__(self) -> None:
        self._log(self.level, LOADING_SUFFIX)

    def __exit__(
        self,
        type_: type[BaseException] | None,
        value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if type_ is None:
            self._log(self.level, DONE_SUFFIX)
        else:
            self._log(self.error_level, FAILURE_SUFFIX)


def log_level_name(quiet: int, verbose: int) -> str | int:
    index = LEVELS.index(DEFAULT_LEVEL) + verbose - quiet
    if index < 0:
        # Above CRITICAL, so nothing is shown.
        return 60
    if index >= len(LEVELS):
        return 0
    return LEVELS[index]


def setup_logger(quiet: int, verbose: int) -> None:
    # stdout is reserved for the output of commands run by `foreach`.
    logger.remove()
    logger.add(sys.stderr, level=log_level_name(quiet, verbose), format="<level>{message}</level>")

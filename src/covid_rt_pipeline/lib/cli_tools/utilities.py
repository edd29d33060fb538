"""Logging and application tooling shared by the command line entry points."""
from bdb import BdbQuit
import functools
from pathlib import Path
import sys
from typing import Any, Callable, Optional, Union

from loguru import logger

LOG_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | '
    '<level>{level: <8}</level> | '
    '<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - '
    '<level>{message}</level>'
)
LOG_LEVELS = {0: 'WARNING', 1: 'INFO', 2: 'DEBUG'}


def configure_logging_to_terminal(verbose: int) -> None:
    """Replaces the default loguru sink with a stdout sink.

    Parameters
    ----------
    verbose
        Verbosity count from the command line. 0 logs warnings and errors,
        1 adds info messages and 2 or more adds debug messages.

    """
    logger.remove()  # Clear the default configuration
    add_logging_sink(sys.stdout, verbose, colorize=True)


def add_logging_sink(sink, verbose: int, colorize: bool = False, serialize: bool = False) -> int:
    """Adds a new output sink to the logger with the configured verbosity."""
    level = LOG_LEVELS[min(verbose, max(LOG_LEVELS))]
    return logger.add(sink, colorize=colorize, level=level,
                      format=LOG_FORMAT, serialize=serialize)


def monitor_application(func: Callable, logger_: Any, with_debugger: bool) -> Callable:
    """Logs uncaught exceptions with a traceback and optionally debugs them.

    The exception is raised again after logging (and after the debugger
    session, if any) so the command exits with an error.
    """

    @functools.wraps(func)
    def _wrapped(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (BdbQuit, KeyboardInterrupt):
            raise
        except Exception:
            logger_.exception(f'Uncaught exception in {func.__name__}.')
            if with_debugger:
                import pdb
                import traceback
                traceback.print_exc()
                pdb.post_mortem()
            raise

    return _wrapped


def get_output_root(cli_argument: Optional[str], specification_value: Optional[str],
                    default: Union[str, Path] = '.') -> Path:
    """Determine the output root hierarchically.

    The command line wins over the specification, which wins over
    ``default``. Relative roots are resolved against the working directory.

    """
    output_root = cli_argument or specification_value or default
    return Path(output_root).resolve()

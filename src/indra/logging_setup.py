"""Logging configuration for applications embedding the task manager."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from indra.config import IndraConfig

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    *,
    level: int | str | None = None,
    rich_console: bool = True,
    config: IndraConfig | None = None,
) -> logging.Handler:
    """
    Install one root handler and route warnings.warn(...) into logging.

    An explicit `level` wins over `config.log_level`; with neither, WARNING.
    Pre-existing root handlers are removed, so calling this twice does not
    duplicate output. The library itself never calls this.
    """
    if level is None:
        level = config.log_level_number if config is not None else logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler: logging.Handler
    if rich_console:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            log_time_format="[" + LOG_DATEFMT + "]",
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))

    handler.setLevel(level)
    root.addHandler(handler)
    logging.captureWarnings(True)
    return handler

import os
from pathlib import Path
from typing import Optional

from .logger import Logger, Verbosity

ENV_LOG_LEVEL = "NDLATTICE_LOG_LEVEL"

# the library logs to stdout until init() is called; warnings and errors only,
# unless the environment asks for more
_logger = Logger(
    stdout=True,
    verbosity=Verbosity.parse(os.environ.get(ENV_LOG_LEVEL, "warn")),
)

init = _logger.init
log = _logger.log
debug = _logger.debug
info = _logger.info
warn = _logger.warn
error = _logger.error
set_verbosity = _logger.set_verbosity
close = _logger.close
log_file: Optional[Path] = None # kept up to date by Logger.log_file


__all__ = [
    "ENV_LOG_LEVEL",
    "Logger",
    "Verbosity",
    "close",
    "debug",
    "error",
    "info",
    "init",
    "log",
    "log_file",
    "set_verbosity",
    "warn",
]

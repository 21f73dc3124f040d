from __future__ import annotations

from enum import IntEnum
from os import PathLike
from pathlib import Path

from .logwriters import LogWriter, MessageWriter, StdOutWriter


class Verbosity(IntEnum):
    DISABLED = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4

    @classmethod
    def parse(cls, value: str | int | Verbosity) -> Verbosity:
        """Accept a Verbosity, its integer value, or its name in any case
        (e.g. "debug").
        """
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(
                    f"Unknown verbosity {value!r}, expected one of "
                    f"{[level.name.lower() for level in cls]}"
                )
        return cls(value)


class Logger:
    """Writes the library's diagnostic messages, e.g. storage allocation at
    DEBUG level or disabled bound checks at WARN level. A single instance
    exists, whose methods make up the ndlattice.logger module.

    Every message is prefixed with the name of its level, e.g.
    `[WARN] Bound checks disabled`.
    """

    def __init__(self,
        stdout: bool,
        verbosity: Verbosity,
    ):
        self.writers: dict[str, LogWriter] = {}
        if stdout:
            self.writers["stdout"] = StdOutWriter()
        self.verbosity = Verbosity.parse(verbosity)
        self._log_file: Path | None = None
        self.initialized = False

    @property
    def log_file(self) -> Path | None:
        return self._log_file

    @log_file.setter
    def log_file(self, log_file: Path | None) -> None:
        self._log_file = log_file
        # mirror the value on the module, where users read it
        import ndlattice.logger as logger
        logger.log_file = log_file

    def init(self,
        log_file: PathLike | None = None,
        stdout: bool = True,
        verbosity: Verbosity | str = Verbosity.INFO,
        append: bool = True,
    ) -> None:
        """Replace the default output with the given outputs. Can only be
        called once until the logger is closed.

        :param log_file: text file receiving every message. Missing parent
            folders are created.
        :param stdout: also print messages to standard output
        :param verbosity: messages above this level are discarded
        :param append: keep the previous contents of `log_file`
        """
        if self.initialized:
            raise RuntimeError("Logging has already been initialized!")

        self.close()

        if log_file is not None:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self.writers["txt"] = LogWriter(log_file, name="txt", append=append)
        self.log_file = log_file

        if stdout:
            self.writers["stdout"] = StdOutWriter()

        self.verbosity = Verbosity.parse(verbosity)
        self.initialized = True

    def log(self, *args, level: Verbosity = Verbosity.INFO) -> None:
        """Join `args` without separators and write the result to every
        output, if `level` is within the current verbosity.
        """
        if level > self.verbosity or level == Verbosity.DISABLED:
            return
        parts = [f"[{level.name}] "]
        parts.extend(str(arg) for arg in args)
        for writer in self.writers.values():
            if isinstance(writer, MessageWriter):
                writer.write_message(parts)

    def debug(self, *args) -> None:
        self.log(*args, level=Verbosity.DEBUG)

    def info(self, *args) -> None:
        self.log(*args, level=Verbosity.INFO)

    def warn(self, *args) -> None:
        self.log(*args, level=Verbosity.WARN)

    def error(self, *args) -> None:
        self.log(*args, level=Verbosity.ERROR)

    def set_verbosity(self, verbosity: Verbosity | str) -> None:
        self.verbosity = Verbosity.parse(verbosity)

    def close(self) -> None:
        """Close every output. The logger stays usable but writes nowhere
        until `init` is called again.
        """
        for writer in self.writers.values():
            writer.close()
        self.writers.clear()
        self.initialized = False

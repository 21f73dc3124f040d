from __future__ import annotations

import sys
from os import PathLike
from typing import Iterable, Optional, TextIO


class LogWriter:
    """Base class of every output the logger writes to. Subclasses that pass
    a `name` when they are defined can be created by that name, e.g.
    `LogWriter(path, name="txt")`.
    """

    _registry: dict[str, type[LogWriter]] = {}

    def __init_subclass__(cls, /, name: Optional[str] = None, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if name is not None:
            cls._registry[name] = cls

    def __new__(cls, *args, name: Optional[str] = None, **kwargs):
        if cls is not LogWriter:
            return super().__new__(cls)
        if name is None:
            raise ValueError("LogWriter requires the keyword argument 'name'.")
        try:
            writer_cls = cls._registry[name]
        except KeyError:
            raise RuntimeError(f"No log writer registered under {name=}")
        return super().__new__(writer_cls)

    def close(self) -> None:
        pass


class MessageWriter:
    """Mixin for writers that accept text messages."""

    def write_message(self, parts: Iterable[str]) -> None:
        raise NotImplementedError


class TxtFileWriter(MessageWriter, LogWriter, name="txt"):
    """Writes each message as one line of a text file.

    :param filename: path of the log file
    :param append: keep existing contents of the file
    """

    def __init__(self,
        filename: PathLike,
        name: Optional[str] = None,
        append: bool = True,
    ) -> None:
        self.stream: TextIO = open(filename, "a" if append else "w")

    def write_message(self, parts: Iterable[str]) -> None:
        self.stream.write("".join(parts) + "\n")
        self.stream.flush()

    def close(self) -> None:
        self.stream.close()


class StdOutWriter(TxtFileWriter):
    # not registered: the logger adds it when asked to print to stdout
    def __init__(self) -> None:
        self.stream = sys.stdout

    def close(self) -> None:
        # sys.stdout belongs to the interpreter
        pass

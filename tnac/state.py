"""Runtime state shared between the driver and the REPL."""

from __future__ import annotations

import os
import sys
from typing import Any, Optional, TextIO


class State:
    """Holds the interpreter core, I/O streams, number base and run flag."""

    DEFAULT_BASE = 10

    def __init__(
        self,
        core: Any,
        in_stream: Optional[TextIO] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ) -> None:
        self._core = core
        self._in = in_stream
        self._default_out = out
        self._err = err
        self._out_file: Optional[TextIO] = None
        self._num_base = self.DEFAULT_BASE
        self._running = False

    @property
    def tnac_core(self) -> Any:
        return self._core

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Mark the runtime as running."""
        self._running = True

    def stop(self) -> None:
        """Mark the runtime as stopped."""
        self._running = False

    @property
    def num_base(self) -> int:
        return self._num_base

    def reset_base(self) -> None:
        """Restore the default number base."""
        self._num_base = self.DEFAULT_BASE

    def set_base(self, base: int) -> None:
        """Set the base integers are printed in."""
        self._num_base = base

    def redirect_to_file(self, path: "str | os.PathLike[str]") -> bool:
        """Send output to a file; returns False if it cannot be opened."""
        self._close_file()
        try:
            self._out_file = open(path, "w", encoding="utf-8")
        except OSError:
            return False
        return True

    def reset_output(self) -> None:
        """Close any output file and send output back to the default stream."""
        self._close_file()

    def _close_file(self) -> None:
        if self._out_file is not None:
            self._out_file.close()
            self._out_file = None

    @property
    def in_stream(self) -> TextIO:
        return self._in if self._in is not None else sys.stdin

    @property
    def out(self) -> TextIO:
        if self._out_file is not None:
            return self._out_file
        return self._default_out if self._default_out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr
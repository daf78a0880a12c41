"""Command line parsing for the interpreter."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

ErrorHandler = Callable[[str], None]


class CommandLine:
    """Parses command line arguments and keeps the resulting settings.

    The arguments exclude the program name. The first argument is the
    input file; the rest are flags. With no arguments at all the
    interpreter runs interactively.
    """

    def __init__(self, on_error: Optional[ErrorHandler] = None) -> None:
        self._on_error = on_error
        self._input_file = ""
        self._interactive = False

    @property
    def input_file(self) -> str:
        return self._input_file

    @property
    def interactive(self) -> bool:
        return self._interactive

    def parse(self, argv: Sequence[str]) -> None:
        """Parse the arguments, replacing any earlier settings."""
        self._input_file = ""
        self._interactive = False

        if not argv:
            self._interactive = True
            return

        self._input_file = argv[0]
        for arg in argv[1:]:
            self._consume(arg)

    def has_input_file(self) -> bool:
        """True if an input file was given."""
        return bool(self._input_file)

    def _error(self, msg: str) -> None:
        if self._on_error is not None:
            self._on_error(msg)

    def _consume(self, arg: str) -> None:
        if arg == "-i":
            self._interactive = True
        else:
            self._error(f"Unknown command line argument '{arg}'")
"""The driver that reads input, evaluates it and reports diagnostics.

The driver works with an interpreter core (see the REPL module for its
interface; the driver also uses ``compile()`` with no arguments and
``fetch_line(loc)``) and a feedback object that takes callbacks:
``on_error``, ``on_parse_error``, ``on_compile_error``,
``on_compile_warning``, ``on_compile_note`` and ``on_command``. The
feedback object also provides ``load_file(name)``, which returns True
if the file was loaded, along with ``error`` and ``compile_error``.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, TextIO

from .cmdline import CommandLine
from .formatting import Color, add_color, clear_color, format_location, print_colored
from .repl import Repl
from .state import State


class Driver:
    """Parses the command line, sets up callbacks and runs the interpreter.

    Call ``run`` to process the input file, then ``run_interactive`` to
    start the REPL if it was asked for.
    """

    def __init__(
        self,
        argv: Sequence[str],
        core: Any,
        feedback: Any,
        *,
        in_stream: Optional[TextIO] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ) -> None:
        self._feedback = feedback
        self._core = core
        self._state = State(core, in_stream, out, err)
        self._repl = Repl(self._state, feedback)
        self._parse_only = False
        self._settings = CommandLine(
            on_error=lambda msg: self.on_generic_error("Command line", msg)
        )
        self._settings.parse(argv)
        self._set_callbacks()

    @property
    def state(self) -> State:
        return self._state

    def run(self) -> None:
        """Load and compile the input file, if one was given."""
        if not self._settings.has_input_file():
            return
        if not self._feedback.load_file(self._settings.input_file):
            return
        if not self._parse_only:
            self._core.compile()

    def run_interactive(self) -> None:
        """Run the REPL if interactive mode was asked for."""
        if not self._settings.interactive:
            return
        self._feedback.on_command(self._repl.on_command)
        self._repl.declare_commands()
        self._repl.run()

    def fetch_line(self, loc: Any) -> str:
        """Return the source line at a location, from the REPL or the core."""
        repl_line = self._repl.fetch_line(loc)
        if repl_line is not None:
            return repl_line
        return self._core.fetch_line(loc)

    def on_generic_error(self, prefix: str, msg: str) -> None:
        """Report an error that has no source location."""
        self._state.err.write(f"<{prefix}>")
        self._post(Color.RED, " error: ", msg)

    def on_error(self, loc: Any, msg: str) -> None:
        """Report a parse or compile error at a location."""
        self._report(loc, Color.RED, " error: ", msg)

    def on_warning(self, loc: Any, msg: str) -> None:
        """Report a warning at a location."""
        self._report(loc, Color.YELLOW, " warning: ", msg)

    def on_note(self, loc: Any, msg: str) -> None:
        """Post a note at a location."""
        self._report(loc, Color.CYAN, " note: ", msg)

    # Callbacks

    def _set_callbacks(self) -> None:
        fb = self._feedback
        fb.on_error(lambda msg: self.on_generic_error("Generic", msg))
        fb.on_parse_error(lambda err: self.on_error(err.pos.at, err.message))
        fb.on_compile_error(self.on_error)
        fb.on_compile_warning(self.on_warning)
        fb.on_compile_note(self.on_note)
        fb.on_command(self._core.process_cmd)
        self._core.declare_cmd("parse_only", self._set_parse_only)

    def _set_parse_only(self, cmd: Any) -> None:
        self._parse_only = True

    # Output

    def _post(self, color: Color, mark: str, msg: str) -> None:
        err = self._state.err
        print_colored(err, color, mark)
        err.write(f"{msg}\n")

    def _report(self, loc: Any, color: Color, mark: str, msg: str) -> None:
        err = self._state.err
        err.write(f"{format_location(loc)}:")
        self._post(color, mark, msg)
        self._post_line(err, loc)

    def _post_line(self, stream: TextIO, loc: Any) -> None:
        line = self.fetch_line(loc)
        if not line:
            return
        add_color(stream, Color.WHITE)
        stream.write(f"{line}\n")
        stream.write("^\n".rjust(loc.col + 2))
        clear_color(stream)
"""Interactive read-eval-print loop.

The REPL drives an interpreter core and a feedback object that are
passed in from outside.

The core provides:

* ``parse(text, loc)``: parses a line read at ``loc`` and returns the
  new AST node, or the current whole AST (see ``get_ast``) if nothing
  new came out of it, as happens for commands.
* ``compile(node)``: compiles a node.
* ``get_ast()`` and ``get_cfg()``: the whole AST and the control flow
  graph.
* ``variables()``, ``functions()``, ``modules()``: symbols grouped by
  scope, in the form the symbol printer takes.
* ``declare_cmd(name, handler, params=(), required=0)``: declares a
  command; ``params`` holds the token kinds of its arguments.
* ``process_cmd(cmd)``: runs the handler of a command.

A command has ``pos`` (the token naming it) and ``args`` (tokens).
Tokens have ``value``, ``kind`` and ``at`` (a location).

The feedback object provides ``error(msg)`` and
``compile_error(loc, msg)``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from .ast_printer import AstPrinter
from .formatting import Color, print_colored, println_colored
from .ir_printer import IrPrinter
from .lister import Lister
from .source import Location, SourceManager
from .state import State
from .sym_printer import SymPrinter

_FAKE_PATH = Path("REPL")

_ENV_OUTPUTS = (
    ("list", "out.tnac", "==========  CODE   ==========\n"),
    ("modules", "tnmodules", "========== MODULES ==========\n"),
    ("funcs", "tnfuncs", "==========  FUNCS  ==========\n"),
    ("vars", "tnvars", "==========  VARS   ==========\n"),
    ("ast", "out.ast", "==========  AST    ==========\n"),
    ("ir", "out.tni", "==========  IR   ==========\n"),
)


@dataclass
class _Token:
    value: str
    kind: str
    at: Any


@dataclass
class _Command:
    pos: _Token
    args: list = field(default_factory=list)


class Repl:
    """Reads expressions and commands from the input and evaluates them."""

    def __init__(self, state: State, feedback: Any) -> None:
        self._src_mgr = SourceManager()
        self._loc = Location(_FAKE_PATH, self._src_mgr)
        self._inputs: dict[int, str] = {}
        self._state = state
        self._feedback = feedback
        self._last: Any = None
        self._commands_ready = False

    def run(self) -> None:
        """Run the loop until stopped or until the input ends."""
        self._state.start()
        core = self._state.tnac_core

        while self._state.is_running:
            text = self._consume_input()
            if text is None:
                self._state.stop()
                break
            if not text:
                continue

            parsed = core.parse(text, self._loc)
            if parsed is core.get_ast():
                continue

            self._last = parsed
            core.compile(parsed)

    def declare_commands(self) -> None:
        """Declare the commands the REPL understands; only once."""
        if self._commands_ready:
            return

        core = self._state.tnac_core
        core.declare_cmd("exit", lambda cmd: self._on_exit())
        core.declare_cmd("result", self._print_result, params=("Identifier",), required=0)
        core.declare_cmd("list", self._list_code, params=("String",), required=0)
        core.declare_cmd("ast", self._print_ast, params=("String", "Identifier"), required=0)
        core.declare_cmd("ir", self._print_ir, params=("String",), required=0)
        core.declare_cmd("vars", self._print_vars, params=("String",), required=0)
        core.declare_cmd("funcs", self._print_funcs, params=("String",), required=0)
        core.declare_cmd("modules", self._print_modules, params=("String",), required=0)
        core.declare_cmd("env", self._print_all, params=("String",), required=0)

        for name, base in (("bin", 2), ("oct", 8), ("dec", 10), ("hex", 16)):
            core.declare_cmd(name, self._base_setter(base))

        self._commands_ready = True

    def on_command(self, cmd: Any) -> None:
        """Pass a command on to the core."""
        self._state.tnac_core.process_cmd(cmd)

    def fetch_line(self, loc: Any) -> Optional[str]:
        """Return the input line a REPL location points to, or None."""
        if not loc or loc.file != _FAKE_PATH:
            return None
        return self._inputs.get(loc.line)

    # Input

    def _consume_input(self) -> Optional[str]:
        out = self._state.out
        print_colored(out, Color.YELLOW, ">> ")
        out.flush()
        line = self._state.in_stream.readline()
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]

        if not line.lstrip():
            println_colored(self._state.out, Color.RED, "\nEnter an expression\n")
            return ""

        return self._inputs.setdefault(self._loc.line, line)

    def _try_redirect_output(self, path_token: Any) -> bool:
        value = str(path_token.value)
        if not value:
            return False
        file_name = os.path.abspath(value)

        if not self._state.redirect_to_file(file_name):
            self._feedback.compile_error(
                path_token.at, f"Failed to write file '{file_name}': not accessible"
            )
            return False
        return True

    def _end_redirect(self) -> None:
        self._state.reset_output()

    # Command handlers

    def _base_setter(self, base: int) -> Callable[[Any], None]:
        def handler(cmd: Any) -> None:
            self._state.set_base(base)

        return handler

    def _on_exit(self) -> None:
        println_colored(self._state.out, Color.YELLOW, "\nGoody-bye")
        self._state.stop()

    def _print_cmd(self, cmd: Any, print_func: Callable[[], None]) -> None:
        args = list(cmd.args)
        wrap_in_lines = True
        if args:
            wrap_in_lines = not self._try_redirect_output(args[0])

        if wrap_in_lines:
            self._state.out.write("\n")
        print_func()
        if wrap_in_lines:
            self._state.out.write("\n")
        self._end_redirect()

    def _print_result(self, cmd: Any) -> None:
        """The result command takes no action."""

    def _list_code(self, cmd: Any) -> None:
        self._print_cmd(
            cmd, lambda: Lister()(self._state.tnac_core.get_ast(), self._state.out)
        )

    def _ast_to_print(self, cmd: Any) -> Any:
        core = self._state.tnac_core
        args = list(cmd.args)
        if len(args) < 2:
            return core.get_ast()

        second = args[1]
        if second.value == "current":
            return self._last

        self._feedback.compile_error(
            second.at, f"Wrong argument at position 1: '{second.value}'"
        )
        return core.get_ast()

    def _print_ast(self, cmd: Any) -> None:
        node = self._ast_to_print(cmd)
        self._print_cmd(cmd, lambda: AstPrinter()(node, self._state.out))

    def _print_ir(self, cmd: Any) -> None:
        self._print_cmd(
            cmd, lambda: IrPrinter()(self._state.tnac_core.get_cfg(), self._state.out)
        )

    def _print_symbols(self, collection: Any) -> None:
        SymPrinter()(collection, self._state.out)

    def _print_vars(self, cmd: Any) -> None:
        self._print_cmd(
            cmd, lambda: self._print_symbols(self._state.tnac_core.variables())
        )

    def _print_funcs(self, cmd: Any) -> None:
        self._print_cmd(
            cmd, lambda: self._print_symbols(self._state.tnac_core.functions())
        )

    def _print_modules(self, cmd: Any) -> None:
        self._print_cmd(
            cmd, lambda: self._print_symbols(self._state.tnac_core.modules())
        )

    def _print_all(self, cmd: Any) -> None:
        loc = cmd.pos.at
        args = list(cmd.args)
        directory: Optional[str] = None

        if args:
            directory = str(args[0].value)
            try:
                os.mkdir(directory)
            except FileExistsError:
                if not os.path.isdir(directory):
                    self._feedback.error(
                        f"#env command failed with error '{os.strerror(17)}'"
                    )
                    return
            except OSError as exc:
                message = exc.strerror or str(exc)
                self._feedback.error(f"#env command failed with error '{message}'")
                return

        for name, file_name, header in _ENV_OUTPUTS:
            cmd_args = []
            if directory is not None:
                cmd_args.append(_Token(f"{directory}/{file_name}", "String", loc))
            else:
                self._state.out.write(header)
            self.on_command(_Command(_Token(name, "Command", loc), cmd_args))
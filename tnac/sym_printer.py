"""Printing of declared symbols grouped by scope.

A collection is a mapping from scopes to sequences of symbols, or an
iterable of ``(scope, symbols)`` pairs.

* A scope has ``kind`` (``Global``, ``Module``, ``Function`` or
  ``Block``; a string or an enum member whose ``name`` is used),
  ``module`` (for module scopes), ``function`` (for function scopes),
  ``scope_ref`` (an object with a ``name``, or None) and
  ``enclosing_skip_internal`` (the nearest enclosing scope that is not
  an internal block, or None).
* A symbol has ``kind`` (``Variable``, ``Function``, ``Parameter`` or
  ``Module``), ``name`` and ``at`` (its location). Functions and modules
  also have ``params``.
"""

from __future__ import annotations

import sys
from typing import Any, Iterable, Optional, TextIO

from .formatting import Color, print_colored, println_colored


def _kind_name(obj: Any) -> str:
    kind = obj.kind
    return kind if isinstance(kind, str) else kind.name


class SymPrinter:
    """Prints information about declared entities grouped by scope."""

    def __init__(self) -> None:
        self._out: TextIO = sys.stdout

    def __call__(self, collection: Any, out: Optional[TextIO] = None) -> None:
        """Print the symbols of ``collection`` to ``out`` (stdout by default)."""
        self._out = out if out is not None else sys.stdout
        groups = list(collection.items() if hasattr(collection, "items") else collection)
        for idx, (scope, symbols) in enumerate(groups, start=1):
            self._write("In scope '")
            self._print_scope(scope)
            self._write("':\n")
            for sym in symbols:
                self._write(" ")
                self._print_sym(sym)
                self._write(" at ")
                println_colored(self._out, Color.DARK_GRAY, sym.at)
            if idx != len(groups):
                self._write("\n")

    def _write(self, text: str) -> None:
        self._out.write(text)

    def _print_scope(self, scope: Any) -> None:
        if scope is None:
            print_colored(self._out, Color.RED, "UNKNOWN")
            return

        kind = _kind_name(scope)
        match kind:
            case "Global":
                print_colored(self._out, Color.BLUE, "Global")
                return
            case "Module":
                self._print_module(scope.module)
            case "Function":
                self._print_func(scope.function)
            case "Block":
                self._print_internal_scope(scope)
            case _:
                raise ValueError(f"unknown scope kind '{kind}'")

        self._write("<=")
        self._print_scope(scope.enclosing_skip_internal)

    def _print_module(self, module: Any) -> None:
        print_colored(self._out, Color.CYAN, module.name)
        self._print_params(module.params, omit_if_empty=True)

    def _print_func(self, function: Any) -> None:
        print_colored(self._out, Color.CYAN, function.name)
        self._print_params(function.params, omit_if_empty=False)

    def _print_internal_scope(self, scope: Any) -> None:
        scope_ref = scope.scope_ref
        if scope_ref is None:
            self._write("Internal")
            return
        print_colored(self._out, Color.WHITE, scope_ref.name)

    def _print_sym(self, sym: Any) -> None:
        match _kind_name(sym):
            case "Variable":
                print_colored(self._out, Color.CYAN, sym.name)
            case "Function":
                self._print_func(sym)
            case "Parameter":
                print_colored(self._out, Color.YELLOW, sym.name)
            case "Module":
                self._print_module(sym)
            case _:
                pass

    def _print_params(self, params: Iterable[Any], omit_if_empty: bool) -> None:
        items = list(params)
        if omit_if_empty and not items:
            return
        self._write(" (")
        for idx, param in enumerate(items):
            if idx:
                self._write(", ")
            self._print_sym(param)
        self._write(")")
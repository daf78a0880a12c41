"""Listing of the source code that an AST stands for.

The lister works on any objects that follow the node interface used by
the AST printer. In addition, every node has a ``parent`` (None for the
root), and tokens may carry ``is_keyword``, ``is_literal`` and
``is_identifier`` flags that pick the colour they are listed in.

Whether a statement in a scope needs an explicit ``:`` separator after
it is decided by a separator check. By default a node is taken to end
with an implicit separator if its ``has_implicit_separator`` attribute
is true.
"""

from __future__ import annotations

import sys
from typing import Any, Callable, Iterable, Optional, TextIO

from .formatting import Color, add_color, clear_color

SeparatorCheck = Callable[[Any], bool]

_SCOPE_KINDS = frozenset({"Scope", "Module"})


def _kind_name(node: Any) -> str:
    kind = node.kind
    return kind if isinstance(kind, str) else kind.name


def _is_scope_like(node: Any) -> bool:
    return _kind_name(node) in _SCOPE_KINDS


def _default_separator_check(node: Any) -> bool:
    return bool(getattr(node, "has_implicit_separator", False))


class Lister:
    """Prints the source code corresponding to an AST node."""

    SPACES_PER_INDENT = 2

    def __init__(self, separator_check: Optional[SeparatorCheck] = None) -> None:
        self._out: TextIO = sys.stdout
        self._indent_level = 0
        self._has_implicit_separator = separator_check or _default_separator_check
        self._printers: dict[str, Callable[[Any], None]] = {
            "Error": self._print_error,
            "Root": self._print_root,
            "Module": self._print_module,
            "Import": self._print_import,
            "Scope": self._print_scope,
            "Literal": self._print_pos_token,
            "Identifier": self._print_pos_token,
            "Unary": self._print_unary,
            "Tail": self._print_tail,
            "IsType": self._print_type_check,
            "TypeRes": self._print_type_resolve,
            "Binary": self._print_binary,
            "Assign": self._print_binary,
            "Decl": self._print_decl,
            "Abs": self._print_abs,
            "Array": self._print_array,
            "Paren": self._print_paren,
            "Typed": self._print_typed,
            "Call": self._print_call,
            "Result": self._print_pos_token,
            "Ret": self._print_ret,
            "CondShort": self._print_cond_short,
            "Cond": self._print_cond,
            "Dot": self._print_dot,
            "Pattern": self._print_pattern,
            "Matcher": self._print_matcher,
            "VarDecl": self._print_var_decl,
            "ParamDecl": self._print_param_decl,
            "FuncDecl": self._print_func_decl,
        }

    def __call__(self, node: Any, out: Optional[TextIO] = None) -> None:
        """List the code of ``node`` to ``out`` (stdout by default)."""
        self._out = out if out is not None else sys.stdout
        self._indent_level = 0
        self._default_style()
        self._print(node)
        clear_color(self._out)

    # Dispatch

    def _print(self, node: Any) -> None:
        if node is None:
            return
        kind = _kind_name(node)
        printer = self._printers.get(kind)
        if printer is None:
            raise ValueError(f"unknown AST node kind '{kind}'")
        self._indent(node)
        printer(node)

    # Node printers

    def _print_root(self, node: Any) -> None:
        for module in node.modules:
            self._print(module)

    def _print_module(self, node: Any) -> None:
        name = "<fake>" if node.is_fake else node.name
        self._comment_style()
        self._write(f"\\Module: {name}")
        self._default_style()
        self._endl()
        for import_dir in node.imports:
            self._print(import_dir)
        params = list(node.params)
        if params:
            self._kw_style()
            self._write("_entry ")
            self._default_style()
            self._print_params(params)
            self._endl()
        self._print_scope(node)

    def _print_import(self, node: Any) -> None:
        self._kw_style()
        self._write("_import ")
        self._default_style()
        parts = list(node.name)
        if parts:
            last = parts[-1]
            for part in parts:
                self._print_token(part.pos, False)
                if part is not last:
                    self._write(".")
        alias = node.alias_name
        if alias is not None:
            self._kw_style()
            self._write(" _as ")
            self._default_style()
            self._print_token(alias.pos, False)
        self._endl()

    def _print_scope(self, node: Any) -> None:
        children = list(node.children)
        size = len(children)
        for idx, child in enumerate(children, start=1):
            self._print(child)
            if _kind_name(child) == "Error":
                self._endl()
                continue
            if idx != size and not self._has_implicit_separator(child):
                self._write(":")
            self._endl()

    def _print_decl(self, node: Any) -> None:
        self._print(node.declarator)

    def _print_binary(self, node: Any) -> None:
        self._print(node.left)
        self._print_token(node.op, False)
        self._print(node.right)

    def _print_unary(self, node: Any) -> None:
        self._print_token(node.op, False)
        self._print(node.operand)

    def _print_type_check(self, node: Any) -> None:
        self._print_token(node.type, False)
        self._write("? ")
        self._print(node.operand)

    def _print_type_resolve(self, node: Any) -> None:
        self._print(node.checker)
        self._write("->")
        self._print(node.resolver)

    def _print_tail(self, node: Any) -> None:
        self._print(node.operand)
        self._write("@")

    def _print_array(self, node: Any) -> None:
        self._print_args(node.elements, "[", "]")

    def _print_paren(self, node: Any) -> None:
        self._write("(")
        self._print(node.internal_expr)
        self._write(")")

    def _print_abs(self, node: Any) -> None:
        self._write("|")
        self._print(node.expression)
        self._write("|")

    def _print_typed(self, node: Any) -> None:
        self._print_token(node.type_name, False)
        self._print_args(node.args, "(", ")")

    def _print_call(self, node: Any) -> None:
        self._print(node.callable)
        self._print_args(node.args, "(", ")")

    def _print_pos_token(self, node: Any) -> None:
        self._print_token(node.pos, False)

    def _print_ret(self, node: Any) -> None:
        self._print_token(node.pos, True)
        self._print(node.returned_value)

    def _print_error(self, node: Any) -> None:
        add_color(self._out, Color.RED)
        self._write(f"\\{node.message}")
        self._default_style()

    def _print_cond_short(self, node: Any) -> None:
        self._write("{")
        self._print(node.cond)
        self._write("}")
        self._write("->{")
        if node.on_true is not None:
            self._print(node.on_true)
        if node.on_false is not None:
            self._write(", ")
            self._print(node.on_false)
        self._write("}")

    def _print_cond(self, node: Any) -> None:
        self._write("{")
        self._print(node.cond)
        self._write("}")

        patterns = node.patterns
        if list(patterns.children):
            self._endl()
            saved = self._indent_level
            self._indent_level += 1
            self._print_scope(patterns)
            self._indent_level = saved
            self._indent(self._nearest_to_scope(node))

        self._write("; ")

    def _print_dot(self, node: Any) -> None:
        self._print(node.accessed)
        self._write(".")
        self._print(node.accessor)

    def _print_pattern(self, node: Any) -> None:
        self._print(node.matcher)
        self._endl()
        body = node.body
        if list(body.children):
            saved = self._indent_level
            self._indent_level += 1
            self._print_scope(body)
            self._indent(node.parent)
            self._indent_level = saved
        self._indent(node)
        self._write(";")

    def _print_matcher(self, node: Any) -> None:
        self._write("{")
        if not node.is_default and not node.is_unary:
            if not node.has_implicit_op:
                self._print_token(node.pos, False)
            self._print(node.checked)
        if node.is_unary:
            self._print_token(node.pos, False)
        self._write("}->")

    def _print_var_decl(self, node: Any) -> None:
        self._print_token(node.pos, False)
        self._write("=")
        self._print(node.initialiser)

    def _print_param_decl(self, node: Any) -> None:
        self._id_style()
        self._write(str(node.name))
        self._default_style()

    def _print_func_decl(self, node: Any) -> None:
        pos = node.pos
        if getattr(pos, "is_identifier", False):
            self._kw_style()
            self._write("_fn ")
            self._default_style()

        self._print_token(pos, False)
        self._print_params(node.params)

        body = node.body
        if list(body.children):
            self._endl()
            saved = self._indent_level
            self._indent_level += 1
            self._print_scope(body)
            self._indent_level = saved
            self._indent(self._nearest_to_scope(node))
        else:
            self._write(" ")

        self._write("; ")

    # Helpers

    @staticmethod
    def _nearest_to_scope(node: Any) -> Any:
        res = node.parent
        while True:
            nxt = res.parent
            if nxt is None or _is_scope_like(nxt):
                return res
            res = nxt

    def _print_args(self, args: Iterable[Any], open_ch: str, close_ch: str) -> None:
        self._write(open_ch)
        items = list(args)
        for idx, arg in enumerate(items, start=1):
            self._print(arg)
            if idx != len(items):
                self._write(", ")
        self._write(close_ch)

    def _print_params(self, params: Iterable[Any]) -> None:
        self._write("(")
        items = list(params)
        for idx, param in enumerate(items, start=1):
            self._print(param)
            if idx != len(items):
                self._write(", ")
        self._write(")")

    def _indent(self, node: Any) -> None:
        if _is_scope_like(node):
            return
        parent = node.parent
        if parent is None or not _is_scope_like(parent):
            return
        self._write(" " * (self.SPACES_PER_INDENT * self._indent_level))

    def _write(self, text: str) -> None:
        self._out.write(text)

    def _endl(self) -> None:
        self._write("\n")

    def _print_token(self, token: Any, add_space: bool) -> None:
        if getattr(token, "is_keyword", False):
            self._kw_style()
        elif getattr(token, "is_literal", False):
            self._lit_style()
        elif getattr(token, "is_identifier", False):
            self._id_style()

        self._write(str(token.value))
        if add_space:
            self._write(" ")
        self._default_style()

    # Styles

    def _reset_style(self) -> None:
        clear_color(self._out)
        add_color(self._out, Color.WHITE)

    def _id_style(self) -> None:
        self._reset_style()
        add_color(self._out, Color.GREEN)

    def _kw_style(self) -> None:
        self._reset_style()
        add_color(self._out, Color.CYAN)

    def _lit_style(self) -> None:
        self._reset_style()
        add_color(self._out, Color.YELLOW)

    def _default_style(self) -> None:
        self._reset_style()

    def _comment_style(self) -> None:
        self._reset_style()
        add_color(self._out, Color.DARK_GRAY)
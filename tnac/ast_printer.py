"""Tree-shaped printing of abstract syntax trees.

The printer works on any objects that follow the node interface below.
Every node has a ``kind`` (a string or an enum member whose ``name`` is
used) and an ``is_valid`` flag. Nodes other than roots, modules and
scopes have a ``pos`` token. Every token has a ``value`` and an ``at``
location.

Kind-specific attributes:

* ``Root``: ``modules``
* ``Module``: ``is_fake``, ``name``, ``symbol``, ``imports``, ``params``,
  ``children``
* ``Import``: ``name`` (parts with a ``name``), ``alias_name`` (or None)
* ``Scope``: ``children``
* ``Assign``/``Binary``: ``op``, ``left``, ``right``
* ``Decl``: ``declarator``; ``VarDecl``: ``name``, ``initialiser``;
  ``FuncDecl``: ``name``, ``params``, ``body``; ``ParamDecl``: ``name``
* ``Unary``: ``op``, ``operand``; ``IsType``: ``type``, ``operand``;
  ``Tail``: ``operand``
* ``TypeRes``: ``checker``, ``resolver``
* ``Array``: ``elements``; ``Paren``: ``internal_expr``;
  ``Abs``: ``expression``
* ``Typed``: ``type_name``, ``args``; ``Call``: ``callable``, ``args``
* ``CondShort``: ``cond``, ``on_true``, ``on_false`` (either may be None)
* ``Cond``: ``cond``, ``patterns``; ``Pattern``: ``matcher``, ``body``
* ``Matcher``: ``is_default``, ``is_unary``, ``has_implicit_op``,
  ``checked``
* ``Dot``: ``accessed``, ``accessor``; ``Ret``: ``returned_value``
* ``Error``: ``message``
* ``Literal``, ``Identifier``, ``Result``: nothing more
"""

from __future__ import annotations

import sys
from typing import Any, Iterable, Optional, TextIO

from .formatting import Color, add_color, clear_color, format_location, print_colored

_BRANCH_INDENT = "| "
_BLANK_INDENT = "  "
_CHILD_PREFIX = "|-"
_LAST_CHILD_PREFIX = "`-"

_UNLOCATED_KINDS = frozenset({"Root", "Module", "Scope"})


def _kind_name(node: Any) -> str:
    kind = node.kind
    return kind if isinstance(kind, str) else kind.name


class AstPrinter:
    """Prints an AST top to bottom as an indented tree."""

    def __init__(self) -> None:
        self._counts: list[int] = []
        self._out: TextIO = sys.stdout

    def __call__(self, node: Any, out: Optional[TextIO] = None) -> None:
        """Print the tree rooted at ``node`` to ``out`` (stdout by default)."""
        self._counts = []
        self._out = out if out is not None else sys.stdout
        if node is not None:
            self._walk(node)

    # Traversal

    def _walk(self, node: Any) -> None:
        kind = _kind_name(node)
        self._visit(node, kind)
        for child in self._children(node, kind):
            if child is not None:
                self._walk(child)

    @staticmethod
    def _children(node: Any, kind: str) -> Iterable[Any]:
        match kind:
            case "Root":
                return list(node.modules)
            case "Module":
                return [*node.imports, *node.params, *node.children]
            case "Scope":
                return list(node.children)
            case "Assign" | "Binary":
                return [node.left, node.right]
            case "Decl":
                return [node.declarator]
            case "VarDecl":
                return [node.initialiser]
            case "FuncDecl":
                return [*node.params, node.body]
            case "Unary" | "IsType" | "Tail":
                return [node.operand]
            case "TypeRes":
                return [node.checker, node.resolver]
            case "Array":
                return list(node.elements)
            case "Paren":
                return [node.internal_expr]
            case "Abs":
                return [node.expression]
            case "Typed":
                return list(node.args)
            case "Call":
                return [node.callable, *node.args]
            case "CondShort":
                return [node.cond, node.on_true, node.on_false]
            case "Cond":
                return [node.cond, node.patterns]
            case "Pattern":
                return [node.matcher, node.body]
            case "Matcher":
                if node.is_default or node.is_unary:
                    return []
                return [node.checked]
            case "Dot":
                return [node.accessed, node.accessor]
            case "Ret":
                return [node.returned_value]
            case _:
                return []

    def _visit(self, node: Any, kind: str) -> None:
        match kind:
            case "Root":
                self._visit_root(node)
            case "Module":
                self._visit_module(node)
            case "Import":
                self._visit_import(node)
            case "Scope":
                self._simple(node, "<scope>", len(node.children))
            case "Assign":
                self._with_token(node, "Assign expression", node.op, 2)
            case "Decl":
                self._visit_decl(node)
            case "VarDecl":
                self._visit_named_decl(node, "<VarName: ", indent=False)
            case "ParamDecl":
                self._visit_named_decl(node, "<Function parameter: ", indent=True)
            case "FuncDecl":
                self._visit_named_decl(node, "<FuncName: ", indent=False)
            case "Binary":
                self._with_token(node, "Binary expression", node.op, 2)
            case "Unary":
                self._with_token(node, "Unary expression", node.op, 1)
            case "IsType":
                self._with_token(node, "Is type", node.type, 1)
            case "TypeRes":
                self._simple(node, "On type", 2)
            case "Tail":
                self._simple(node, "Tail expression", 1)
            case "Array":
                self._visit_array(node)
            case "Paren":
                self._simple(node, "Paren expression", 1)
            case "Abs":
                self._simple(node, "Abs expression", 1)
            case "Typed":
                self._with_token(node, "Typed expression", node.type_name, len(node.args))
            case "Call":
                self._simple(node, "Call expression", len(node.args) + 1)
            case "CondShort":
                self._visit_cond_short(node)
            case "Cond":
                self._simple(node, "Conditional expression", 2)
            case "Dot":
                self._simple(node, "Dot expression", 2)
            case "Pattern":
                self._simple(node, "Pattern", 2)
            case "Matcher":
                self._visit_matcher(node)
            case "Literal":
                self._with_token(node, "Literal expression", node.pos, None)
            case "Identifier":
                self._visit_identifier(node)
            case "Result":
                self._simple(node, "Last eval result ", None)
            case "Ret":
                self._simple(node, "Ret expression", 1)
            case "Error":
                self._visit_error(node)
            case _:
                raise ValueError(f"unknown AST node kind '{kind}'")

    # Node visitors

    def _simple(self, node: Any, designator: str, child_count: Optional[int]) -> None:
        self._indent()
        self._node_designator(designator)
        self._additional_info(node)
        self._endl()
        if child_count is not None:
            self._push_parent(child_count)

    def _with_token(
        self, node: Any, designator: str, token: Any, child_count: Optional[int]
    ) -> None:
        self._indent()
        self._node_designator(designator)
        self._print_token(token)
        self._additional_info(node)
        self._endl()
        if child_count is not None:
            self._push_parent(child_count)

    def _visit_root(self, node: Any) -> None:
        self._simple(node, "<root>", len(node.modules))

    def _visit_module(self, node: Any) -> None:
        self._indent()
        if node.is_fake:
            self._node_designator("<Fake module>")
        else:
            self._node_designator("<module: ")
            self._print_module_name(node)
            self._node_designator(">")
        self._additional_info(node)
        self._endl()
        self._push_parent(len(node.children) + len(node.params) + len(node.imports))

    def _visit_import(self, node: Any) -> None:
        self._indent()
        self._node_designator("<import: ")
        parts = list(node.name)
        if parts:
            last = parts[-1]
            for part in parts:
                if part is not last:
                    self._node_value(part.name)
                    self._out.write(".")
                else:
                    self._module_name(part.name)
        self._node_designator(">")
        self._additional_info(node)
        self._endl()

        alias = node.alias_name
        if alias is not None:
            self._push_parent(1)
            self._indent()
            self._node_designator("Alias ")
            self._out.write("'")
            self._module_name(alias.name)
            self._out.write("' ")
            self._additional_info(alias)
            self._endl()

    def _visit_decl(self, node: Any) -> None:
        self._indent()
        self._node_designator("Declaration ")
        declarator = node.declarator
        match _kind_name(declarator):
            case "VarDecl":
                self._push_parent(1)
            case "FuncDecl":
                self._push_parent(len(declarator.params) + 1)

    def _visit_named_decl(self, node: Any, intro: str, indent: bool) -> None:
        if indent:
            self._indent()
        self._out.write(intro)
        self._node_value(node.name)
        self._out.write(">")
        self._additional_info(node)
        self._endl()

    def _visit_array(self, node: Any) -> None:
        size = len(node.elements)
        self._indent()
        self._node_designator("Array expression ")
        self._out.write("[")
        print_colored(self._out, Color.CYAN, size)
        self._out.write("] ")
        self._additional_info(node)
        self._endl()
        self._push_parent(size)

    def _visit_cond_short(self, node: Any) -> None:
        self._indent()
        self._node_designator("Short conditional")

        child_count = 1
        has_true = node.on_true is not None
        has_false = node.on_false is not None
        if has_true or has_false:
            self._out.write(": ")
        if has_true:
            self._node_value("has-true")
            child_count += 1
        if has_false:
            if has_true:
                self._out.write(", ")
            self._node_value("has-false")
            child_count += 1

        self._additional_info(node)
        self._endl()
        self._push_parent(child_count)

    def _visit_matcher(self, node: Any) -> None:
        self._indent()
        if node.is_default:
            self._node_value("default")
        elif node.is_unary:
            self._braced_value(node.pos.value)
        elif node.has_implicit_op:
            self._push_parent(1)
            self._braced_value("==")
        else:
            self._push_parent(1)
            self._braced_value(node.pos.value)
        self._additional_info(node)
        self._endl()

    def _visit_identifier(self, node: Any) -> None:
        self._indent()
        self._node_designator("Id expression ")
        self._out.write("'")
        self._node_value(node.name)
        self._out.write("' ")
        self._additional_info(node)
        self._endl()

    def _visit_error(self, node: Any) -> None:
        self._indent()
        self._failure_condition("Error '")
        self._failure_condition(node.message)
        self._failure_condition("' at")
        self._location_info(node.pos.at)
        self._endl()

    # Indentation

    def _push_parent(self, child_count: int) -> None:
        self._counts.append(child_count)

    def _pop_empty(self) -> None:
        while self._counts and not self._counts[-1]:
            self._counts.pop()

    def _indent(self) -> None:
        self._pop_empty()
        if not self._counts:
            return
        self._counts[-1] -= 1
        *parents, last = self._counts
        self._out.write(
            "".join(_BRANCH_INDENT if count else _BLANK_INDENT for count in parents)
        )
        self._out.write(_CHILD_PREFIX if last else _LAST_CHILD_PREFIX)

    # Output pieces

    def _node_designator(self, text: str) -> None:
        print_colored(self._out, Color.DARK_YELLOW, text)

    def _failure_condition(self, text: str) -> None:
        print_colored(self._out, Color.RED, text)

    def _node_value(self, text: str) -> None:
        print_colored(self._out, Color.CYAN, text)

    def _module_name(self, text: str) -> None:
        print_colored(self._out, Color.DARK_CYAN, text)

    def _braced_value(self, text: str) -> None:
        self._out.write("{")
        self._node_value(text)
        self._out.write("}")

    def _invalid_mark(self, node: Any) -> None:
        if not node.is_valid:
            self._failure_condition(" has-errors")

    def _location_info(self, loc: Any) -> None:
        add_color(self._out, Color.DARK_GRAY)
        self._out.write(f" ({format_location(loc)})")
        clear_color(self._out)

    def _additional_info(self, node: Any) -> None:
        if _kind_name(node) not in _UNLOCATED_KINDS:
            self._location_info(node.pos.at)
        self._invalid_mark(node)

    def _endl(self) -> None:
        self._out.write("\n")

    def _print_token(self, token: Any) -> None:
        self._out.write(" '")
        self._node_value(str(token.value))
        self._out.write("' ")

    def _print_module_name(self, node: Any) -> None:
        parts: list[str] = []
        scope = node.symbol.owner_scope
        while scope is not None:
            scope_ref = getattr(scope, "scope_ref", None)
            module = getattr(scope, "module", None)
            if scope_ref is not None:
                parts.append(scope_ref.name)
            elif module is not None:
                parts.append(module.name)
            scope = scope.enclosing

        for part in reversed(parts):
            self._node_value(part)
            self._out.write(".")
        self._module_name(node.name)
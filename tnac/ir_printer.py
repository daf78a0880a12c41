"""Text printing of the intermediate representation.

The printer works on any objects that follow the interface below.

* The graph (``cfg``) has ``modules`` (top-level functions in declaration
  order), ``constants`` (global constants) and ``find_array(arr)``, which
  returns the global constant holding an interned array, or None.
* A function has ``name``, ``id`` (an integer entity id), ``owner_func``
  (None for a module), ``children`` (nested functions) and ``blocks``.
* A basic block has ``name``, ``preds`` (incoming edges) and
  ``instructions``.
* An edge has ``value`` (an operand) and ``incoming`` (a block).
* An instruction has ``opcode`` (a string or an enum member whose
  ``name`` is used, such as ``"Add"`` or ``"Ret"``), ``opcode_str`` (the
  keyword printed for it) and ``operands``.
* An operand has ``kind`` (``value``, ``register``, ``param``, ``block``,
  ``edge``, ``index``, ``name`` or ``typeid``) and ``data``.
* A register has ``is_global``, ``name`` (None if unnamed) and ``index``.
* A constant has ``target_reg`` and ``value``.

Evaluation values are None (undefined), bool, int, float, complex,
Fraction, lists or tuples (arrays), or function objects with ``id`` and
``name``.

The graph is printed as: the declarations of all functions, the global
constants, and then each module followed by its nested functions, depth
first.
"""

from __future__ import annotations

import sys
from collections import deque
from fractions import Fraction
from typing import Any, Callable, Optional, TextIO

from .formatting import Color, add_color, clear_color, format_entity_id, print_colored

TypeNamer = Callable[[Any], str]

PREDS_OFFSET = 50

_BINARY_OPS = frozenset({
    "Add", "Sub", "Mul", "Div", "Mod", "Pow", "Root", "And", "Or", "Xor",
    "CmpE", "CmpL", "CmpLE", "CmpNE", "CmpG", "CmpGE", "Test",
})
_UNARY_OPS = frozenset({"Abs", "CmpNot", "CmpIs", "Plus", "Neg", "BNeg", "Head", "Tail"})
_INSTANCE_OPS = frozenset({"Bool", "Int", "Float", "Frac", "Cplx"})


def _kind_name(kind: Any) -> str:
    return kind if isinstance(kind, str) else kind.name


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _default_type_name(value: Any) -> str:
    if value is None:
        return "undef"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, complex):
        return "complex"
    if isinstance(value, Fraction):
        return "fraction"
    if _is_array(value):
        return "array"
    return "function"


class IrPrinter:
    """Prints the functions of a control flow graph with their instructions."""

    def __init__(self, type_name: Optional[TypeNamer] = None) -> None:
        self._type_name = type_name or _default_type_name
        self._cfg: Any = None
        self._out: TextIO = sys.stdout

    def __call__(self, cfg: Any, out: Optional[TextIO] = None) -> None:
        """Print ``cfg`` to ``out`` (stdout by default)."""
        self._out = out if out is not None else sys.stdout
        self._cfg = cfg
        self._declare_funcs()

        constants = list(cfg.constants)
        for idx, constant in enumerate(constants, start=1):
            self._visit_constant(constant, idx == len(constants))

        for module in cfg.modules:
            self._walk_function(module)

    # Traversal

    def _walk_function(self, fn: Any) -> None:
        self._func_intro(fn)
        self._endl()
        for block in fn.blocks:
            self._walk_block(block)
        self._keyword("end")
        self._endl()
        self._endl()
        for child in fn.children:
            self._walk_function(child)

    def _walk_block(self, block: Any) -> None:
        instructions = list(block.instructions)
        if not instructions:
            raise ValueError(f"basic block '{block.name}' has no instructions")

        self._kw_string(block.name)
        self._plain(":")
        self._print_preds(block)
        self._endl()

        for instr in instructions:
            self._visit_instruction(instr)

        if _kind_name(instructions[-1].opcode) != "Ret":
            self._endl()

    def _visit_instruction(self, instr: Any) -> None:
        self._plain("  ")
        opcode = _kind_name(instr.opcode)
        if opcode in _BINARY_OPS:
            self._print_fixed(instr, assign=True, count=2)
        elif opcode in _UNARY_OPS:
            self._print_fixed(instr, assign=True, count=1)
        elif opcode == "Select":
            self._print_fixed(instr, assign=True, count=3)
        elif opcode in ("Arr", "Alloc"):
            self._print_alloc(instr, opcode)
        elif opcode in ("Store", "Append"):
            self._print_fixed(instr, assign=False, count=2)
        elif opcode == "Load":
            self._print_fixed(instr, assign=True, count=1)
        elif opcode == "Call":
            self._print_call(instr)
        elif opcode == "Jump":
            self._print_jump(instr)
        elif opcode == "Ret":
            self._print_fixed(instr, assign=False, count=1)
        elif opcode == "Phi" or opcode in _INSTANCE_OPS:
            self._print_listed(instr)
        elif opcode == "DynBind":
            self._print_fixed(instr, assign=True, count=2)
        else:
            raise ValueError(f"unknown instruction op code '{opcode}'")
        self._endl()

    def _visit_constant(self, constant: Any, is_last: bool) -> None:
        self._keyword("global_alloc")
        self._vreg(constant.target_reg)
        self._plain(" = ")
        self._value(constant.value, ref_interned=False)
        self._endl()
        if is_last:
            self._endl()

    # Instructions

    def _print_preds(self, block: Any) -> None:
        preds = list(block.preds)
        if not preds:
            return
        self._plain(" " * max(PREDS_OFFSET - (len(block.name) + 1), 0))
        add_color(self._out, Color.WHITE)
        self._plain("; preds = ")
        self._plain(", ".join(f"%{pred.incoming.name}" for pred in preds))
        clear_color(self._out)

    def _print_assign(self, op: Any) -> None:
        self._print_operand(op)
        self._plain(" = ")

    def _print_fixed(self, instr: Any, assign: bool, count: int) -> None:
        ops = list(instr.operands)
        start = 0
        if assign:
            self._print_assign(ops[0])
            start = 1
        self._keyword(instr.opcode_str)
        self._print_operand_list(ops[start:start + count])

    def _print_alloc(self, instr: Any, opcode: str) -> None:
        ops = list(instr.operands)
        self._print_assign(ops[0])
        self._keyword(instr.opcode_str)
        if opcode == "Arr":
            self._print_operand(ops[1])

    def _print_call(self, instr: Any) -> None:
        ops = list(instr.operands)
        self._print_assign(ops[0])
        self._keyword(instr.opcode_str)
        self._print_operand(ops[1])
        self._plain("( ")
        self._print_operand_list(ops[2:])
        self._plain(" )")

    def _print_jump(self, instr: Any) -> None:
        ops = list(instr.operands)
        self._keyword(instr.opcode_str)
        self._print_operand_list(ops[:3] if len(ops) >= 3 else ops[:1])

    def _print_listed(self, instr: Any) -> None:
        ops = list(instr.operands)
        self._print_assign(ops[0])
        self._keyword(instr.opcode_str)
        self._print_operand_list(ops[1:])

    def _print_operand_list(self, ops: list) -> None:
        for idx, op in enumerate(ops):
            if idx:
                self._plain(", ")
            self._print_operand(op)

    def _print_operand(self, op: Any) -> None:
        kind = _kind_name(op.kind)
        data = op.data
        match kind:
            case "value":
                self._value(data)
            case "register":
                self._vreg(data)
            case "param":
                self._keyword("param")
                print_colored(self._out, Color.YELLOW, data)
            case "block":
                self._block(data)
            case "edge":
                self._plain("[ ")
                self._print_operand(data.value)
                self._plain(", ")
                self._block(data.incoming)
                self._plain(" ]")
            case "index":
                self._keyword("idx")
                print_colored(self._out, Color.YELLOW, data)
            case "name":
                self._plain("'")
                print_colored(self._out, Color.MAGENTA, data)
                self._plain("'")
            case "typeid":
                self._keyword(str(data), add_space=False)
            case _:
                raise ValueError(f"unknown operand kind '{kind}'")

    # Values

    def _value(self, val: Any, ref_interned: bool = True) -> None:
        type_name = self._type_name(val)
        if val is None:
            self._kw_string(type_name)
            return

        if _is_array(val):
            if ref_interned:
                interned = self._cfg.find_array(val)
                if interned is not None:
                    self._vreg(interned.target_reg)
                    return
            self._keyword(type_name)
            self._plain("[ ")
            for idx, item in enumerate(val):
                if idx:
                    self._plain(", ")
                self._value(item)
            self._plain(" ]")
            return

        self._keyword(type_name)
        if isinstance(val, complex):
            self._pair(val.real, val.imag)
        elif isinstance(val, Fraction):
            self._pair(val.numerator, val.denominator)
        elif isinstance(val, (bool, int, float)):
            print_colored(self._out, Color.YELLOW, val)
        else:
            self._entity_id(val.id)
            self._plain(" [ ")
            self._name(val.name)
            self._plain(" ]")

    def _pair(self, first: Any, second: Any) -> None:
        self._plain("[ ")
        print_colored(self._out, Color.YELLOW, first)
        self._plain(", ")
        print_colored(self._out, Color.YELLOW, second)
        self._plain(" ]")

    # Pieces

    def _vreg(self, reg: Any) -> None:
        self._plain("@" if reg.is_global else "%")
        self._plain(reg.name if reg.name is not None else str(reg.index))

    def _block(self, block: Any) -> None:
        self._keyword("label")
        self._name("%")
        self._name(block.name)

    def _entity_id(self, entity_id: int) -> None:
        print_colored(self._out, Color.DARK_YELLOW, format_entity_id(entity_id))

    def _kw_string(self, text: str) -> None:
        print_colored(self._out, Color.BLUE, text)

    def _keyword(self, text: str, add_space: bool = True) -> None:
        self._kw_string(text)
        if add_space:
            self._plain(" ")

    def _name(self, text: str) -> None:
        print_colored(self._out, Color.CYAN, text)

    def _plain(self, text: str) -> None:
        self._out.write(text)

    def _endl(self) -> None:
        self._out.write("\n")

    # Declarations

    def _declare_funcs(self) -> None:
        queue = deque(reversed(list(self._cfg.modules)))
        while queue:
            fn = queue.popleft()
            self._keyword("declare")
            self._func_intro(fn)
            self._endl()
            queue.extend(fn.children)
        self._endl()

    def _func_intro(self, fn: Any) -> None:
        self._keyword("function" if fn.owner_func is not None else "module")
        self._entity_id(fn.id)
        self._name(" @")
        self._name(fn.name)
import io
from fractions import Fraction
from types import SimpleNamespace

import pytest

from tnac.ir_printer import PREDS_OFFSET, IrPrinter


def op(kind, data):
    return SimpleNamespace(kind=kind, data=data)


def reg(index=0, name=None, is_global=False):
    return SimpleNamespace(index=index, name=name, is_global=is_global)


def instr(opcode, *operands):
    return SimpleNamespace(opcode=opcode, opcode_str=opcode.lower(), operands=list(operands))


def block(name, *instructions, preds=()):
    return SimpleNamespace(name=name, instructions=list(instructions), preds=list(preds))


def func(name, fid, blocks=(), children=(), owner=None):
    return SimpleNamespace(
        name=name, id=fid, blocks=list(blocks), children=list(children), owner_func=owner
    )


class Graph:
    def __init__(self, modules, constants=()):
        self.modules = list(modules)
        self.constants = list(constants)

    def find_array(self, arr):
        for const in self.constants:
            if const.value is arr:
                return const
        return None


def render(graph, **kwargs):
    out = io.StringIO()
    IrPrinter(**kwargs)(graph, out)
    return out.getvalue()


def ret_block(value_op):
    return block("entry", instr("Ret", value_op))


def test_declarations_come_first_breadth_first():
    main = func("main", 1, [ret_block(op("value", 1))])
    child = func("f", 2, [ret_block(op("value", 2))], owner=main)
    main.children.append(child)
    text = render(Graph([main]))
    assert text.startswith("declare module 1 @main\ndeclare function 2 @f\n\n")


def test_functions_end_with_end_keyword_and_children_follow():
    main = func("main", 1, [ret_block(op("value", 1))])
    child = func("f", 2, [ret_block(op("value", 2))], owner=main)
    main.children.append(child)
    text = render(Graph([main]))
    assert text.count("end \n\n") == 2
    assert text.index("\nmodule 1 @main") < text.index("\nfunction 2 @f")


def test_binary_instruction_line():
    body = block(
        "entry",
        instr("Add", op("register", reg(0)), op("register", reg(1)), op("register", reg(2))),
        instr("Ret", op("register", reg(0))),
    )
    text = render(Graph([func("main", 1, [body])]))
    assert "  %0 = add %1, %2\n" in text


def test_preds_are_aligned_to_offset():
    a = block("a", instr("Ret", op("value", 1)))
    b = block("b", instr("Ret", op("value", 1)))
    edges = [SimpleNamespace(incoming=a, value=None), SimpleNamespace(incoming=b, value=None)]
    target = block("entry", instr("Ret", op("value", 1)), preds=edges)
    text = render(Graph([func("main", 1, [target])]))
    line = next(ln for ln in text.splitlines() if ln.startswith("entry:"))
    assert line.index(";") == PREDS_OFFSET
    assert line.endswith("; preds = %a, %b")


def test_value_uses_type_name():
    graph = Graph([func("main", 1, [ret_block(op("value", 5))])])
    text = render(graph, type_name=lambda v: type(v).__name__)
    assert "  ret int 5\n" in text


def test_undefined_value_prints_only_type_name():
    graph = Graph([func("main", 1, [ret_block(op("value", None))])])
    text = render(graph, type_name=lambda v: "undef" if v is None else "x")
    assert "  ret undef\n" in text


def test_fraction_and_complex_values():
    frac_graph = Graph([func("main", 1, [ret_block(op("value", Fraction(-1, 2)))])])
    assert "[ -1, 2 ]" in render(frac_graph)
    cplx_graph = Graph([func("main", 1, [ret_block(op("value", complex(1, 2)))])])
    assert "[ 1, 2 ]" in render(cplx_graph)


def test_function_value_prints_id_and_name():
    fn_value = SimpleNamespace(id=3, name="callee")
    graph = Graph([func("main", 1, [ret_block(op("value", fn_value))])])
    assert "3 [ callee ]" in render(graph)


def test_interned_array_is_referenced_by_register():
    arr = [1, 2]
    const = SimpleNamespace(target_reg=reg(name="arr", is_global=True), value=arr)
    graph = Graph([func("main", 1, [ret_block(op("value", arr))])], [const])
    text = render(graph)
    alloc_line = next(ln for ln in text.splitlines() if ln.startswith("global_alloc"))
    assert alloc_line.startswith("global_alloc @arr = ")
    assert "[ " in alloc_line and "1, " in alloc_line
    ret_line = next(ln for ln in text.splitlines() if ln.strip().startswith("ret"))
    assert ret_line.strip() == "ret @arr"


def test_non_interned_array_prints_elements():
    arr = [1, 2]
    graph = Graph([func("main", 1, [ret_block(op("value", arr))])])
    ret_line = next(ln for ln in render(graph).splitlines() if ln.strip().startswith("ret"))
    assert ret_line.count("[ ") == 1 and ret_line.endswith(" ]")


def test_block_without_ret_is_followed_by_blank_line():
    first = block("first", instr("Jump", op("block", block("second", instr("Ret", op("value", 1))))))
    second = block("second", instr("Ret", op("value", 1)))
    text = render(Graph([func("main", 1, [first, second])]))
    assert "jump label %first" not in text
    assert "  jump label %second\n\nsecond:" in text
    assert text.endswith("end \n\n")


def test_conditional_jump_prints_three_operands():
    yes = block("yes", instr("Ret", op("value", 1)))
    no = block("no", instr("Ret", op("value", 1)))
    jump = instr("Jump", op("register", reg(1)), op("block", yes), op("block", no))
    text = render(Graph([func("main", 1, [block("entry", jump), yes, no])]))
    assert "jump %1, label %yes, label %no" in text


def test_call_and_phi_and_name_operands():
    source = block("src", instr("Ret", op("value", 1)))
    edge = SimpleNamespace(value=op("register", reg(4)), incoming=source)
    body = block(
        "entry",
        instr("Call", op("register", reg(0)), op("register", reg(1)),
              op("index", 7), op("param", 0)),
        instr("Phi", op("register", reg(2)), op("edge", edge)),
        instr("DynBind", op("register", reg(3)), op("register", reg(1)), op("name", "field")),
        instr("Ret", op("register", reg(2))),
    )
    text = render(Graph([func("main", 1, [body])]))
    assert "call %1( idx 7, param 0 )" in text
    assert "phi [ %4, label %src ]" in text
    assert "dynbind %1, 'field'" in text


def test_unknown_opcode_raises():
    graph = Graph([func("main", 1, [block("entry", instr("Bogus", op("value", 1)))])])
    with pytest.raises(ValueError):
        render(graph)


def test_empty_block_raises():
    graph = Graph([func("main", 1, [block("entry")])])
    with pytest.raises(ValueError):
        render(graph)


def test_no_colour_codes_for_non_console_stream():
    graph = Graph([func("main", 1, [ret_block(op("value", 1))])])
    assert "\x1b" not in render(graph)
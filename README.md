# tnac

Runtime support for the tnac calculator language. The package tracks
source files and positions in them, formats values for display, provides
an interactive shell and a driver, and renders syntax trees, intermediate
representation and symbol tables as text.

## Modules

- `tnac.source`
  - `SourceManager` loads files (`load`), keeps recorded locations
    (`register_location`) and returns the file (`fetch_file`) or source line
    (`fetch_line`) that a location points to. `load` returns the same
    `SourceFile` for the same path and raises `FileNotFoundError` when
    nothing exists at the path.
  - `SourceFile` reads its text on first use (`get_contents`), records line
    extents (`add_line_info`) and returns a line with trailing whitespace
    removed (`fetch_line`). `extract_name` gives the file name without its
    extension, `directory` its parent directory, and `attach_ast` attaches a
    parsed module once.
  - `Location` holds a line and column. A location with no file is a
    "dummy" location (`Location.dummy()`, `is_dummy`). `add_line`,
    `add_col`, `incr_column_by` and `decr_column_by` move it; `record`
    stores a snapshot with its manager.
  - `file_hash(path)` gives the hash that identifies a path.
- `tnac.formatting`
  - `Color` lists the terminal colours. `add_color`, `clear_color`,
    `print_colored` and `println_colored` write colour escapes only when the
    stream is `sys.stdout` or `sys.stderr`; other streams get plain text.
  - `format_value(value, base)` renders evaluation values: `None` as
    `<undef>`, booleans as `_true` / `_false`, lists and tuples as
    `[ a, b ]`, and integers in base 2, 8, 10 or 16 (non-decimal integers
    as their 64-bit two's complement pattern, with a `0b`, `0` or `0x`
    prefix). `print_value` writes the same text to a stream.
  - `format_fraction`, `format_complex`, `format_function`,
    `format_entity_id`, `format_location` and `format_token` render single
    kinds of item.
- `tnac.state` — `State` holds the core object, the input, output and error
  streams, the number base (`set_base`, `reset_base`) and a running flag
  (`start`, `stop`). `redirect_to_file` sends output to a file and
  `reset_output` sends it back.
- `tnac.cmdline` — `CommandLine.parse(argv)` takes the arguments without the
  program name: the first is the input file, `-i` asks for interactive mode,
  and any other argument is reported as unknown to the error handler. With
  no arguments at all, interactive mode is on.
- `tnac.ast_printer` — `AstPrinter()(node, out)` writes an AST as an
  indented tree.
- `tnac.lister` — `Lister()(node, out)` writes the source code an AST
  stands for.
- `tnac.ir_printer` — `IrPrinter()(cfg, out)` writes function declarations,
  global constants and every function's blocks and instructions.
- `tnac.sym_printer` — `SymPrinter()(collection, out)` writes declared
  symbols grouped by scope.
- `tnac.repl` — `Repl` reads lines, hands them to the core and declares the
  shell commands `exit`, `result`, `list`, `ast`, `ir`, `vars`, `funcs`,
  `modules`, `env`, `bin`, `oct`, `dec` and `hex`. The printing commands
  take an optional file path to write to; `env` takes a directory and
  writes all listings into it. `result` does nothing.
- `tnac.driver` — `Driver` parses the arguments, wires up the feedback
  callbacks, compiles the input file (`run`), starts the shell when asked
  (`run_interactive`), and reports errors, warnings and notes with the
  offending source line and a caret under the column.

The printers, `Repl` and `Driver` work on any objects with the attributes
described in each module's docstring.

## Example

```python
import io
from fractions import Fraction

from tnac.formatting import format_value, format_fraction
from tnac.cmdline import CommandLine

print(format_value(255, 16))            # 0xff
print(format_value([1, True, None]))    # [ 1, _true, <undef> ]
print(format_fraction(Fraction(7, 2)))  # 3(1/2)

args = CommandLine()
args.parse(["example.tnac", "-i"])
print(args.input_file, args.interactive)  # example.tnac True
```

## What the package does not do

The package has no parser, evaluator or compiler for the language, and no
command-line program. `Repl` and `Driver` need a core object (parsing,
compiling, commands, symbol tables) and a feedback object (callbacks and
file loading) supplied by the caller; without them there is nothing to
evaluate expressions.

## Tests

The tests use pytest, declared under the `test` extra.
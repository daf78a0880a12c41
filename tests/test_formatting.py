import io
import sys
from fractions import Fraction
from types import SimpleNamespace

from tnac.formatting import (
    Color,
    add_color,
    clear_color,
    format_complex,
    format_entity_id,
    format_fraction,
    format_function,
    format_location,
    format_token,
    format_value,
    print_colored,
    print_value,
    println_colored,
)
from tnac.source import Location


def test_no_colour_on_plain_streams():
    buf = io.StringIO()
    add_color(buf, Color.RED)
    clear_color(buf)
    assert buf.getvalue() == ""


def test_colour_on_stdout(capsys):
    print_colored(sys.stdout, Color.RED, "x")
    assert capsys.readouterr().out == "\x1b[91mx\x1b[m"


def test_println_appends_newline():
    buf = io.StringIO()
    println_colored(buf, Color.CYAN, "hello")
    assert buf.getvalue() == "hello\n"


def test_float_precision():
    buf = io.StringIO()
    print_colored(buf, Color.YELLOW, 1 / 3)
    text = buf.getvalue()
    assert text.startswith("0.")
    assert len(text[2:]) == 16
    assert float(text) == 1 / 3


def test_whole_float_has_no_fraction_digits():
    buf = io.StringIO()
    print_colored(buf, Color.YELLOW, 2.0)
    assert buf.getvalue() == "2"


def test_bool_values():
    assert format_value(True, 10) == "_true"
    assert format_value(False, 16) == "_false"


def test_undefined_value():
    assert format_value(None, 10) == "<undef>"


def test_decimal_int():
    assert format_value(42, 10) == "42"
    assert format_value(-7, 10) == "-7"


def test_hex_round_trip():
    text = format_value(255, 16)
    assert text.startswith("0x")
    assert int(text, 16) == 255


def test_bin_round_trip():
    text = format_value(5, 2)
    assert text.startswith("0b")
    assert int(text, 2) == 5


def test_oct_round_trip():
    text = format_value(8, 8)
    assert text.startswith("0")
    assert int(text, 8) == 8


def test_negative_int_is_twos_complement():
    assert int(format_value(-1, 16), 16) == 2**64 - 1


def test_unsupported_base_is_empty():
    assert format_value(10, 7) == ""


def test_array_value():
    assert format_value([1, True], 10) == "[ 1, _true ]"


def test_array_uses_base():
    text = format_value([255], 16)
    assert text == "[ " + format_value(255, 16) + " ]"


def test_fraction_simple():
    assert format_fraction(Fraction(1, 2)) == "1/2"


def test_fraction_with_whole_part():
    assert format_fraction(Fraction(5, 2)) == "2(1/2)"


def test_fraction_negative():
    text = format_fraction(Fraction(-1, 2))
    assert text == "-" + format_fraction(Fraction(1, 2))


def test_fraction_integral():
    assert format_fraction(Fraction(4, 2)) == "2"


def test_complex():
    assert format_complex(complex(1, 2)) == "(1 + 2i)"


def test_complex_negative_imag():
    assert format_complex(complex(1, -2)) == format_complex(complex(1, 2)).replace("+", "-")


def test_value_dispatches_complex_and_fraction():
    assert format_value(complex(3, 4), 10) == format_complex(complex(3, 4))
    assert format_value(Fraction(7, 3), 10) == format_fraction(Fraction(7, 3))


def test_function():
    fn = SimpleNamespace(name="f", param_count=2)
    assert format_function(fn) == "function: f( 2 )"
    assert format_value(fn, 10) == format_function(fn)


def test_entity_id_is_upper_hex():
    text = format_entity_id(48879)
    assert int(text, 16) == 48879
    assert text == text.upper()


def test_dummy_location():
    assert format_location(Location()) == "<Unknown>:1:1"


def test_location_with_file(tmp_path):
    loc = Location(tmp_path / "a.tn", object())
    assert format_location(loc).startswith(f"<{tmp_path / 'a.tn'}>:")


def test_token():
    assert format_token(SimpleNamespace(value="abc")) == "abc"


def test_print_value_matches_format():
    buf = io.StringIO()
    print_value([1, 2.5, None], 10, buf)
    assert buf.getvalue() == format_value([1, 2.5, None], 10)
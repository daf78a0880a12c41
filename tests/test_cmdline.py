from tnac.cmdline import CommandLine


def test_no_arguments_is_interactive():
    cl = CommandLine()
    cl.parse([])
    assert cl.interactive is True
    assert cl.has_input_file() is False


def test_input_file():
    cl = CommandLine()
    cl.parse(["prog.tn"])
    assert cl.input_file == "prog.tn"
    assert cl.has_input_file() is True
    assert cl.interactive is False


def test_interactive_flag():
    cl = CommandLine()
    cl.parse(["prog.tn", "-i"])
    assert cl.interactive is True
    assert cl.input_file == "prog.tn"


def test_first_argument_is_always_the_file():
    cl = CommandLine()
    cl.parse(["-i"])
    assert cl.input_file == "-i"
    assert cl.interactive is False


def test_unknown_argument_reported():
    errors = []
    cl = CommandLine(errors.append)
    cl.parse(["prog.tn", "-x", "-i"])
    assert len(errors) == 1
    assert "-x" in errors[0]
    assert cl.interactive is True


def test_unknown_argument_without_handler():
    cl = CommandLine()
    cl.parse(["prog.tn", "--what"])
    assert cl.input_file == "prog.tn"
    assert cl.interactive is False


def test_parse_resets_state():
    cl = CommandLine()
    cl.parse(["prog.tn", "-i"])
    cl.parse(["other.tn"])
    assert cl.input_file == "other.tn"
    assert cl.interactive is False
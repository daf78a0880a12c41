import io
import sys

from tnac.state import State


def test_core_is_kept():
    core = object()
    assert State(core).tnac_core is core


def test_running_flag():
    st = State(None)
    assert st.is_running is False
    st.start()
    assert st.is_running is True
    st.stop()
    assert st.is_running is False


def test_base_default_and_reset():
    st = State(None)
    assert st.num_base == State.DEFAULT_BASE
    st.set_base(16)
    assert st.num_base == 16
    st.reset_base()
    assert st.num_base == State.DEFAULT_BASE


def test_default_streams(capsys):
    st = State(None)
    assert st.out is sys.stdout
    assert st.err is sys.stderr


def test_given_streams():
    out, err, inp = io.StringIO(), io.StringIO(), io.StringIO("x")
    st = State(None, inp, out, err)
    assert st.out is out
    assert st.err is err
    assert st.in_stream is inp


def test_redirect_and_reset(tmp_path):
    default = io.StringIO()
    st = State(None, out=default)
    target = tmp_path / "out.txt"
    assert st.redirect_to_file(target) is True
    st.out.write("data")
    assert st.out is not default
    st.reset_output()
    assert st.out is default
    assert target.read_text(encoding="utf-8") == "data"


def test_redirect_failure_keeps_default(tmp_path):
    default = io.StringIO()
    st = State(None, out=default)
    assert st.redirect_to_file(tmp_path) is False
    assert st.out is default


def test_second_redirect_closes_first(tmp_path):
    st = State(None, out=io.StringIO())
    st.redirect_to_file(tmp_path / "a.txt")
    first = st.out
    st.redirect_to_file(tmp_path / "b.txt")
    assert first.closed
    st.reset_output()
    assert (tmp_path / "b.txt").exists()
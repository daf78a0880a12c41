import pytest

from tnac.source import Location, SourceFile, SourceManager, file_hash


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "script.tnac"
    path.write_text("a = 1 :\nb = 2   \nc = a + b", encoding="utf-8")
    return path


def _walk_lines(src_file):
    """Advance a location through the file the way a lexer would."""
    text = src_file.get_contents()
    loc = src_file.make_location()
    for ch in text:
        if ch == "\n":
            loc.add_line()
        else:
            loc.add_col()
    return loc


def test_dummy_is_shared_and_dummy():
    dummy = Location.dummy()
    assert dummy is Location.dummy()
    assert dummy.is_dummy()
    assert not dummy
    assert dummy.file_id() == 0


def test_dummy_record_returns_dummy():
    loc = Location()
    assert loc.record() is Location.dummy()


def test_dummy_has_no_file():
    with pytest.raises(ValueError):
        Location.dummy().file


def test_column_arithmetic_clamps_at_zero():
    loc = Location()
    loc.incr_column_by(5)
    loc.decr_column_by(2)
    assert loc.col == 3
    loc.decr_column_by(10)
    assert loc.col == 0
    loc.add_col()
    assert loc.col == 1


def test_add_line_resets_column():
    loc = Location()
    loc.incr_column_by(4)
    loc.add_line()
    assert (loc.line, loc.col) == (1, 0)


def test_load_missing_file_raises(tmp_path):
    mgr = SourceManager()
    with pytest.raises(FileNotFoundError):
        mgr.load(tmp_path / "missing.tnac")


def test_load_is_idempotent(script):
    mgr = SourceManager()
    first = mgr.load(script)
    second = mgr.load(str(script))
    assert first is second
    assert first.manager is mgr


def test_contents_and_names(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    assert src_file.get_contents() == script.read_text(encoding="utf-8")
    assert src_file.extract_name() == "script"
    assert src_file.directory() == script.resolve().parent
    assert src_file.file_id == file_hash(src_file.path)


def test_get_contents_of_deleted_file_raises(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    script.unlink()
    with pytest.raises(FileNotFoundError):
        src_file.get_contents()


def test_location_file_id_matches_file(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    loc = src_file.make_location()
    assert not loc.is_dummy()
    assert loc.file_id() == src_file.file_id
    assert mgr.fetch_file(loc) is src_file


def test_fetch_lines_after_walking(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    _walk_lines(src_file)
    expected = [line.rstrip() for line in script.read_text(encoding="utf-8").split("\n")]
    assert [src_file.fetch_line(n) for n in range(3)] == expected


def test_fetch_current_line_before_newline(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    src_file.get_contents()
    loc = src_file.make_location()
    assert mgr.fetch_line(loc) == "a = 1 :"


def test_fetch_line_far_past_end_is_empty(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    _walk_lines(src_file)
    assert src_file.fetch_line(10) == ""


def test_record_snapshots_location(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    loc = src_file.make_location()
    loc.incr_column_by(3)
    recorded = loc.record()
    loc.add_col()
    assert recorded is not loc
    assert recorded.col == 3
    assert loc.col == 4
    assert recorded.file == loc.file


def test_unknown_file_location(tmp_path):
    mgr = SourceManager()
    loc = Location(tmp_path / "nowhere.tnac", mgr)
    assert mgr.fetch_file(loc) is None
    assert mgr.fetch_line(loc) == ""


def test_add_line_info_out_of_order_raises(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    loc = Location()
    loc.add_line()
    loc.add_line()
    with pytest.raises(ValueError):
        src_file.add_line_info(loc)


def test_attach_ast_once(script):
    mgr = SourceManager()
    src_file = mgr.load(script)
    module = object()
    src_file.attach_ast(module)
    assert src_file.parsed_ast is module
    with pytest.raises(ValueError):
        src_file.attach_ast(object())


def test_exists(script, tmp_path):
    assert SourceFile.exists(script)
    assert not SourceFile.exists(tmp_path / "absent")
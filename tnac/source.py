"""Source files, source locations and the manager that owns them."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, ClassVar, Optional

PathLike = "str | os.PathLike[str]"


def file_hash(path: "str | os.PathLike[str]") -> int:
    """Return the hash value identifying a file path."""
    return hash(Path(path))


class Location:
    """A line and column position inside a source file.

    A location with no path or no manager is a "dummy" location: it
    tracks line and column numbers but refers to no file.
    """

    __slots__ = ("_path", "_manager", "_line", "_col")

    _dummy: ClassVar[Optional["Location"]] = None

    def __init__(
        self,
        path: "Optional[str | os.PathLike[str]]" = None,
        manager: Optional["SourceManager"] = None,
    ) -> None:
        self._path: Optional[Path] = Path(path) if path is not None else None
        self._manager = manager
        self._line = 0
        self._col = 0

    @classmethod
    def dummy(cls) -> "Location":
        """Return the shared dummy location."""
        if cls._dummy is None:
            cls._dummy = cls()
        return cls._dummy

    def __repr__(self) -> str:
        where = "<dummy>" if self.is_dummy() else str(self._path)
        return f"Location({where}, line={self._line}, col={self._col})"

    def __bool__(self) -> bool:
        return not self.is_dummy()

    def is_dummy(self) -> bool:
        """True if the location refers to no file."""
        return self._path is None or self._manager is None

    @property
    def line(self) -> int:
        return self._line

    @property
    def col(self) -> int:
        return self._col

    @property
    def file(self) -> Path:
        """The path of the file this location belongs to."""
        if self._path is None or self._manager is None:
            raise ValueError("a dummy location has no file")
        return self._path

    @property
    def manager(self) -> "SourceManager":
        """The source manager this location belongs to."""
        if self._path is None or self._manager is None:
            raise ValueError("a dummy location has no source manager")
        return self._manager

    def decr_column_by(self, delta: int) -> None:
        """Move the column back by ``delta``, stopping at zero."""
        self._col = max(self._col - delta, 0)

    def incr_column_by(self, delta: int) -> None:
        """Move the column forward by ``delta``."""
        self._col += delta

    def add_line(self) -> None:
        """Advance to the start of the next line, recording the finished one."""
        if not self.is_dummy():
            src_file = self.manager.fetch_file(self)
            if src_file is not None:
                src_file.add_line_info(self)
        self._line += 1
        self._col = 0

    def add_col(self) -> None:
        """Advance the column by one."""
        self._col += 1

    def file_id(self) -> int:
        """Hash of the file path, or 0 for a dummy location."""
        if self.is_dummy():
            return 0
        return file_hash(self.file)

    def record(self) -> "Location":
        """Store a snapshot of this location with its manager and return it."""
        if self.is_dummy():
            return Location.dummy()
        return self.manager.register_location(self)


class SourceFile:
    """A source file known to a source manager."""

    def __init__(self, path: "str | os.PathLike[str]", manager: "SourceManager") -> None:
        self._path = Path(path)
        self._manager = manager
        self._buffer = ""
        self._parsed: Any = None
        self._lines: list[tuple[int, int]] = []

    def __repr__(self) -> str:
        return f"SourceFile({str(self._path)!r})"

    @staticmethod
    def exists(path: "str | os.PathLike[str]") -> bool:
        """Check whether something exists at the given path."""
        return os.path.exists(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def manager(self) -> "SourceManager":
        return self._manager

    @property
    def file_id(self) -> int:
        """Hash of the file path."""
        return file_hash(self._path)

    @property
    def parsed_ast(self) -> Any:
        """The module AST attached to this file, if any."""
        return self._parsed

    def get_contents(self) -> str:
        """Return the file's text, reading it on first use.

        Raises FileNotFoundError if the file cannot be read.
        """
        if self._buffer:
            return self._buffer
        if not self._read():
            raise FileNotFoundError(f"No such file or directory: '{self._path}'")
        return self._buffer

    def extract_name(self) -> str:
        """Return the file name without its extension."""
        return self._path.stem

    def directory(self) -> Path:
        """Return the directory holding the file."""
        return self._path.parent

    def make_location(self) -> Location:
        """Create a location at the start of this file."""
        return Location(self._path, self._manager)

    def fetch_line(self, line_num: int) -> str:
        """Return the text of a line, without trailing whitespace.

        A line past the recorded ones is taken to be the one being read
        right now and runs to the next line feed or the end of the text.
        """
        buf = self._buffer
        count = len(self._lines)
        if line_num >= count:
            last = line_num - 1 if line_num else 0
            if last < count:
                _, end = self._lines[last]
            elif not last:
                end = 0
            else:
                return ""

            if end > len(buf):
                return ""

            newline = buf.find("\n", end)
            if newline == -1:
                newline = len(buf)
            beg, end = end, newline
        else:
            beg, end = self._lines[line_num]

        end = min(end, len(buf))
        return buf[beg:end].rstrip()

    def add_line_info(self, loc: Location) -> None:
        """Record the extent of the line that ``loc`` has just finished."""
        line_num = loc.line
        if line_num != len(self._lines):
            raise ValueError(
                f"expected line {len(self._lines)}, got line {line_num}"
            )
        beg = self._lines[line_num - 1][1] if line_num else 0
        end = loc.col + 1 + beg
        self._lines.append((beg, end))

    def attach_ast(self, module: Any) -> None:
        """Attach the parsed module AST; it can be attached only once."""
        if self._parsed is not None:
            raise ValueError(f"an AST is already attached to '{self._path}'")
        self._parsed = module

    def _read(self) -> bool:
        self._buffer = ""
        if not self.exists(self._path):
            return False
        try:
            with open(self._path, encoding="utf-8", newline="") as stream:
                self._buffer = stream.read()
        except OSError:
            return False
        return True


class SourceManager:
    """Loads source files and keeps track of recorded locations."""

    def __init__(self) -> None:
        self._files: dict[int, SourceFile] = {}
        self._locations: list[Location] = []

    @staticmethod
    def _canonise(path: "str | os.PathLike[str]") -> Optional[Path]:
        try:
            return Path(os.path.abspath(path)).resolve(strict=False)
        except (OSError, RuntimeError, ValueError):
            return None

    def load(self, path: "str | os.PathLike[str]") -> SourceFile:
        """Load a file, returning the same object for the same path.

        Raises FileNotFoundError if nothing exists at the path.
        """
        load_path = self._canonise(path)
        if load_path is None or not SourceFile.exists(load_path):
            raise FileNotFoundError(
                f"No such file or directory: '{load_path if load_path else path}'"
            )
        key = file_hash(load_path)
        src_file = self._files.get(key)
        if src_file is None:
            src_file = SourceFile(load_path, self)
            self._files[key] = src_file
        return src_file

    def register_location(self, loc: Location) -> Location:
        """Store a copy of the location and return the copy."""
        stored = copy.copy(loc)
        self._locations.append(stored)
        return stored

    def fetch_file(self, loc: Location) -> Optional[SourceFile]:
        """Return the loaded file the location points into, if any."""
        return self._files.get(loc.file_id())

    def fetch_line(self, loc: Location) -> str:
        """Return the source line at the location, or an empty string."""
        src_file = self.fetch_file(loc)
        if src_file is None:
            return ""
        return src_file.fetch_line(loc.line)
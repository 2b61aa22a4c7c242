# rideshare_recon/utilities/core_util.py
"""
Core Utilities

Features:
- String helpers
- File I/O helpers
- Text normalisation shared by the statement and toll parsers
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Literal, Optional, overload

# region Common functions


def is_null_or_whitespace(s: Optional[str]) -> bool:
    """Check if a string is None, empty, or consists only of whitespace."""
    return s is None or s.strip() == ""


def collapse_ws(s: Optional[str]) -> str:
    """Collapse runs of whitespace to single spaces and strip the ends."""
    return " ".join((s or "").split())


@overload
def open_for_read(path: Path, binary: Literal[True], **kwargs: Any) -> IO[bytes]: ...
@overload
def open_for_read(path: Path, binary: Literal[False], **kwargs: Any) -> IO[str]: ...


def open_for_read(path: Path, binary: bool = False, **kwargs: Any) -> IO[Any]:
    mode = "rb" if binary else "r"
    if not binary:
        kwargs.setdefault("encoding", "utf-8-sig")
    return open(path, mode, **kwargs)


def read_text(path: Path | str) -> str:
    """Read a whole text file, tolerating a UTF-8 byte order mark."""
    with open_for_read(Path(path), binary=False) as f:
        return f.read()


# endregion Common functions

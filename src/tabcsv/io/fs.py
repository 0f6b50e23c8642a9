"""
Filesystem helpers for tabcsv.io (file protocol baseline).

Responsibilities
- Provide a minimal stdlib-only abstraction for the file operations used by tabcsv.io:
  size queries and scoped read/write handles.

Notes
- All helpers are synchronous; every handle is released when its context exits, including
  on error.
- Text handles use universal newlines by default, so "\\r\\n" and "\\r" surface as "\\n".
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO, TextIO

PathLike = str | os.PathLike[str]


def file_size(path: PathLike) -> int:
    """
    Return the size of a file in bytes.

    Raises:
        OSError: If the file does not exist or cannot be stat'ed.
    """
    return os.stat(path).st_size


@contextmanager
def open_text(
    path: PathLike,
    encoding: str = "utf-8",
    errors: str = "strict",
    newline: str | None = None,
) -> Iterator[TextIO]:
    """
    Open a file for text read as a context manager.

    Args:
        path (PathLike): File to open.
        encoding (str): Text encoding.
        errors (str): Decoding error handler ("strict", "replace", ...).
        newline (str | None): None for universal newlines; "" to keep terminators verbatim
            (required by the csv module for quoted multi-line cells).

    Yields:
        TextIO: A readable text handle.
    """
    fh = open(path, encoding=encoding, errors=errors, newline=newline)
    try:
        yield fh
    finally:
        fh.close()


@contextmanager
def open_write(path: PathLike) -> Iterator[BinaryIO]:
    """
    Open a file for binary write as a context manager.

    Args:
        path (PathLike): Destination path to open in write-binary mode.

    Yields:
        BinaryIO: A writable handle; closed when the context exits.
    """
    fh = open(path, "wb")
    try:
        yield fh
    finally:
        fh.close()

# app/validation.py
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Optional


class InvalidInput(ValueError):
    pass


class InvalidPath(InvalidInput):
    pass


class InvalidFilename(InvalidInput):
    pass


class NoData(InvalidInput):
    pass


@dataclass(frozen=True)
class ValidatedPath:
    path: str


@dataclass(frozen=True)
class ValidatedData:
    data: str


def validate_path(path: str, suffix: Optional[str] = None) -> ValidatedPath:
    """
    Every path must start with "/". When `suffix` is given the last segment
    is treated as a filename and must end in it (and not be only the suffix).
    The returned path is lexically cleaned.
    """
    if not path or not path.startswith("/"):
        raise InvalidPath(f"Invalid path: {path!r}")
    if "\x00" in path:
        raise InvalidPath("Path contains NUL byte")

    if suffix:
        filename = path.split("/")[-1]
        if not filename.endswith(suffix) or len(filename) == len(suffix):
            raise InvalidFilename(f"Invalid filename: {filename!r}")

    return ValidatedPath(path=posixpath.normpath(path))


def validate_data(data: Optional[str]) -> ValidatedData:
    if not data:
        raise NoData("No data to write to file")
    return ValidatedData(data=data)

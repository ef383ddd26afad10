# app/services/paths.py
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import List

from app.errors import SandboxEscape
from app.validation import InvalidPath, ValidatedPath


@dataclass(frozen=True)
class ResolvedLocation:
    directory: Path
    filename: str

    @property
    def path(self) -> Path:
        return self.directory / self.filename


def _segments(logical: str) -> List[str]:
    # normpath on a rooted path never keeps ".." above "/"
    clean = posixpath.normpath("/" + logical.lstrip("/"))
    return [s for s in clean.split("/") if s]


class PathResolver:
    """
    Map logical paths ("/a/b/c.txt") onto locations under the storage root.

    Paths are canonicalized before joining, and the joined result is checked
    again after symlink resolution, so neither ".." segments nor links inside
    the root can point a location outside of it.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def _confine(self, p: Path) -> Path:
        real = p.resolve()
        if not real.is_relative_to(self.root):
            raise SandboxEscape(f"Path escapes storage root: {p}")
        return real

    def resolve_file(self, vp: ValidatedPath) -> ResolvedLocation:
        parts = _segments(vp.path)
        if not parts:
            raise InvalidPath(f"Path has no filename: {vp.path!r}")

        directory = self._confine(self.root.joinpath(*parts[:-1]))
        location = ResolvedLocation(directory=directory, filename=parts[-1])
        # The leaf itself may be a symlink
        self._confine(location.path)
        return location

    def resolve_directory(self, vp: ValidatedPath) -> Path:
        logical = vp.path
        if logical.endswith("/"):
            logical = logical[:-1]
        return self._confine(self.root.joinpath(*_segments(logical)))

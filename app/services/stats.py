# app/services/stats.py
from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.errors import NotFound, StorageIOError
from app.services.paths import PathResolver
from app.validation import ValidatedPath

logger = logging.getLogger(__name__)

# POSIX alphanumeric class, matched on raw bytes so no locale applies
ALNUM_RE = re.compile(rb"[A-Za-z0-9]")

# Wire value for a statistic with no data behind it
UNDEFINED = -1.0


@dataclass(frozen=True)
class Spread:
    """Population mean and standard deviation; both None when undefined."""
    avg: Optional[float] = None
    stddev: Optional[float] = None

    @property
    def defined(self) -> bool:
        return self.avg is not None

    @classmethod
    def of(cls, values: Sequence[int]) -> "Spread":
        total = sum(values)
        # Covers the empty collection as well
        if total == 0:
            return cls()
        n = len(values)
        avg = total / n
        variance = sum((x - avg) ** 2 for x in values) / n
        return cls(avg=avg, stddev=math.sqrt(variance))

    def wire(self) -> tuple[float, float]:
        if not self.defined:
            return UNDEFINED, UNDEFINED
        return self.avg, self.stddev


@dataclass(frozen=True)
class DirectoryStats:
    file_count: int
    bytes_total: int
    alphanum_ratio: Mapping[str, float]
    alphanum_count: Spread
    word_length: Spread

    def to_dict(self) -> Dict[str, Any]:
        _, alnum_stddev = self.alphanum_count.wire()
        word_avg, word_stddev = self.word_length.wire()
        return {
            "file_count": self.file_count,
            "alphanum_chars_percentage": dict(self.alphanum_ratio),
            "alphanum_chars_stddev": alnum_stddev,
            "word_length_avg": word_avg,
            "word_length_stddev": word_stddev,
            "bytes_total": self.bytes_total,
        }


@dataclass
class _Accumulator:
    file_count: int = 0
    bytes_total: int = 0
    ratios: Dict[str, float] = field(default_factory=dict)
    alnum_counts: List[int] = field(default_factory=list)
    word_lengths: List[int] = field(default_factory=list)

    def add_file(self, key: str, content: bytes):
        self.file_count += 1
        alnum = len(ALNUM_RE.findall(content))
        # Empty or alphanumeric-free files contribute no ratio and no count
        if content and alnum:
            self.ratios[key] = alnum / len(content)
            self.alnum_counts.append(alnum)
        text = content.decode("utf-8", errors="replace")
        self.word_lengths.extend(len(w) for w in text.split())

    def freeze(self) -> DirectoryStats:
        return DirectoryStats(
            file_count=self.file_count,
            bytes_total=self.bytes_total,
            alphanum_ratio=MappingProxyType(dict(self.ratios)),
            alphanum_count=Spread.of(self.alnum_counts),
            word_length=Spread.of(self.word_lengths),
        )


class StatsEngine:
    """
    Lexical statistics over the regular files of one directory.

    Subdirectories add their own entry size to bytes_total but are not
    descended into unless `recursive` is set; then each subdirectory is
    folded in and ratio keys become paths relative to the queried directory.
    Every call recomputes from disk. Any I/O error aborts the whole report.

    Alphanumeric ratios are computed on raw bytes. Word lengths are counted
    in decoded characters, and words are split with str.split(), whose
    whitespace set includes the 0x1c-0x1f separators.
    """

    def __init__(self, resolver: PathResolver, recursive: bool = False):
        self.resolver = resolver
        self.recursive = recursive

    def get_stats(self, vp: ValidatedPath) -> DirectoryStats:
        directory = self.resolver.resolve_directory(vp)
        acc = _Accumulator()
        self._scan(directory, "", acc)
        logger.debug("stats for %s: %d files, %d bytes", directory, acc.file_count, acc.bytes_total)
        return acc.freeze()

    def _list(self, directory: Path) -> List[os.DirEntry]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda e: e.name)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFound(f"Directory not found: {directory}") from e
        except OSError as e:
            raise StorageIOError(f"Cannot list {directory}: {e}") from e

    def _scan(self, directory: Path, prefix: str, acc: _Accumulator):
        for entry in self._list(directory):
            key = prefix + entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
                if not (is_dir or is_file):
                    logger.debug("skipping non-regular entry %s", entry.path)
                    continue
                acc.bytes_total += entry.stat(follow_symlinks=False).st_size
                content = None if is_dir else Path(entry.path).read_bytes()
            except FileNotFoundError as e:
                raise NotFound(f"Entry vanished during scan: {entry.path}") from e
            except OSError as e:
                raise StorageIOError(f"Cannot read {entry.path}: {e}") from e

            if is_file:
                acc.add_file(key, content)
            elif self.recursive:
                self._scan(Path(entry.path), key + "/", acc)

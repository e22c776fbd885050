"""Shared fakes and helpers for the test suite."""

from __future__ import annotations

import copy
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any


class FakeFilesystem:
    """In-memory SlotFilesystem: each path maps to an opaque content value."""

    def __init__(self) -> None:
        self.nodes: dict[Path, Any] = {}
        self.calls: list[tuple[str, Path]] = []
        self.fail_on: set[tuple[str, Path]] = set()

    def put(self, path: Path | str, content: Any) -> None:
        self.nodes[Path(path)] = content

    def get(self, path: Path | str) -> Any:
        return self.nodes[Path(path)]

    def exists(self, path: Path) -> bool:
        return Path(path) in self.nodes

    def copy(self, src: Path, dst: Path) -> None:
        self._record("copy", src)
        src, dst = Path(src), Path(dst)
        if src not in self.nodes:
            raise FileNotFoundError(2, "No such file or directory", str(src))
        if dst in self.nodes:
            raise FileExistsError(17, "File exists", str(dst))
        self.nodes[dst] = copy.deepcopy(self.nodes[src])

    def move(self, src: Path, dst: Path) -> None:
        self._record("move", src)
        src, dst = Path(src), Path(dst)
        if src not in self.nodes:
            raise FileNotFoundError(2, "No such file or directory", str(src))
        if dst in self.nodes:
            raise FileExistsError(17, "File exists", str(dst))
        self.nodes[dst] = self.nodes.pop(src)

    def remove(self, path: Path) -> None:
        self._record("remove", path)
        path = Path(path)
        if path not in self.nodes:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        del self.nodes[path]

    def ops(self, name: str) -> list[Path]:
        return [p for op, p in self.calls if op == name]

    def _record(self, op: str, path: Path) -> None:
        self.calls.append((op, Path(path)))
        if (op, Path(path)) in self.fail_on:
            raise PermissionError(13, "Permission denied", str(path))


class TickingClock:
    """Returns a later time, one minute apart, on every call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 10, 18, 12, 0, 0)

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(minutes=1)
        return now


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Relative path -> bytes for every file under ``root`` (or root itself if a file)."""
    if root.is_file():
        return {".": root.read_bytes()}
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }

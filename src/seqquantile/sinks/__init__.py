"""Snapshot sink abstractions.

Used by ``estimate --emit-every`` to stream intermediate estimates; any object
with ``emit``/``close`` can stand in (e.g. for a plotting harness).
"""
from __future__ import annotations
import json
from typing import Protocol, Dict, Any, List

class SnapshotSink(Protocol):  # pragma: no cover - simple protocol
    def emit(self, snapshot: Dict[str, Any]) -> None: ...  # noqa: D401,E701 - protocol stub
    def close(self) -> None: ...

class JsonlSink:
    def __init__(self, path: str) -> None:
        self.path = path
        self._fh = open(path, "a", encoding="utf-8")

    def emit(self, snapshot: Dict[str, Any]) -> None:
        self._fh.write(json.dumps(snapshot) + "\n")
        self._fh.flush()

    def close(self) -> None:
        self._fh.close()

class MemorySink:
    """Collects snapshots in a list; handy for tests and notebooks."""

    def __init__(self) -> None:
        self.snapshots: List[Dict[str, Any]] = []

    def emit(self, snapshot: Dict[str, Any]) -> None:
        self.snapshots.append(snapshot)

    def close(self) -> None:  # pragma: no cover - trivial
        pass

__all__ = ["SnapshotSink", "JsonlSink", "MemorySink"]

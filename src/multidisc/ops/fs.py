"""Single gateway for every filesystem mutation the organizer makes.

FileOps records each mutation as a FileAction. In dry-run mode nothing is
touched: actions are logged with a "[DRY-RUN] Would ..." prefix and applied
to an in-memory overlay instead, so later steps in the same run (cue
rewrites, playlist creation, directory pruning) see the planned tree.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from loguru import logger

from ..models import ActionKind, FileAction

log = logger.bind(stage="fs")


class FileOps:
    """Mutating filesystem calls with an action ledger and dry-run overlay."""

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run
        self.actions: list[FileAction] = []
        # Overlay state, only populated in dry-run mode
        self._gone: set[Path] = set()
        self._placed: dict[Path, Path] = {}
        self._made_dirs: set[Path] = set()

    # -- Queries (overlay-aware) ---------------------------------------------

    def exists(self, path: Path) -> bool:
        if path in self._placed or path in self._made_dirs:
            return True
        if path in self._gone:
            return False
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        if path in self._made_dirs:
            return True
        if path in self._gone:
            return False
        return path.is_dir()

    def locate(self, path: Path) -> Path:
        """Return where the content planned for path currently lives."""
        return self._placed.get(path, path)

    def read_text(self, path: Path) -> str:
        return self.locate(path).read_text(encoding="utf-8", errors="surrogateescape")

    def list_dir(self, directory: Path) -> list[Path]:
        """Sorted directory entries with planned moves and deletions applied."""
        entries: set[Path] = set()
        if directory.is_dir() and directory not in self._gone:
            entries.update(p for p in directory.iterdir() if p not in self._gone)
        entries.update(p for p in self._placed if p.parent == directory)
        entries.update(d for d in self._made_dirs if d.parent == directory)
        return sorted(entries)

    # -- Mutations -----------------------------------------------------------

    def _record(self, kind: ActionKind, source: Path, dest: Path | None = None) -> None:
        action = FileAction(kind=kind, source=source, dest=dest)
        self.actions.append(action)
        label = kind.capitalize()
        target = f"{source} -> {dest}" if dest is not None else str(source)
        if self.dry_run:
            log.info(f"[DRY-RUN] Would {kind} {target}")
        else:
            log.info(f"{label} {target}")

    def mkdir(self, directory: Path) -> None:
        """Create directory and missing ancestors; no-op if already present."""
        if self.is_dir(directory):
            return
        self._record(ActionKind.MKDIR, directory)
        if self.dry_run:
            current = directory
            while not self.is_dir(current):
                self._made_dirs.add(current)
                self._gone.discard(current)
                current = current.parent
            return
        directory.mkdir(parents=True, exist_ok=True)

    def move(self, source: Path, dest: Path) -> None:
        """Move source to dest, replacing any existing file at dest."""
        self._record(ActionKind.MOVE, source, dest)
        if self.dry_run:
            self._placed[dest] = self.locate(source)
            self._placed.pop(source, None)
            self._gone.add(source)
            self._gone.discard(dest)
            return
        try:
            # Atomic within one filesystem
            os.replace(source, dest)
        except OSError:
            log.debug(f"Rename failed, falling back to shutil.move: {source}")
            shutil.move(str(source), str(dest))

    def write_text(self, path: Path, content: str) -> bool:
        """Write content if it differs from what is on disk. Returns True if written."""
        if self.exists(path):
            try:
                if self.read_text(path) == content:
                    log.debug(f"Unchanged: {path}")
                    return False
            except OSError as e:
                log.debug(f"Could not read {path} for comparison: {e}")
        self._record(ActionKind.WRITE, path)
        if self.dry_run:
            self._gone.discard(path)
            return True
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(content, encoding="utf-8", errors="surrogateescape", newline="")
        tmp.replace(path)
        return True

    def delete(self, path: Path) -> None:
        self._record(ActionKind.DELETE, path)
        if self.dry_run:
            self._placed.pop(path, None)
            self._gone.add(path)
            return
        path.unlink()

    def rmdir(self, directory: Path) -> None:
        self._record(ActionKind.RMDIR, directory)
        if self.dry_run:
            self._made_dirs.discard(directory)
            self._gone.add(directory)
            return
        directory.rmdir()

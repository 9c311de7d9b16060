"""Core enums, constants, and data types for the multi-disc organizer.

Enums:
    DiscKind    -- Role of a disc file during relocation (cue, image, track, playlist).
    ActionKind  -- Filesystem mutation recorded in the run ledger.
    AuditStatus -- Playlist audit classification (OK, WARN, FAIL).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ops.audit import AuditReport


class DiscKind(StrEnum):
    CUE = "cue"
    IMAGE = "image"
    TRACK = "track"
    PLAYLIST = "playlist"


class ActionKind(StrEnum):
    MOVE = "move"
    MKDIR = "mkdir"
    WRITE = "write"
    DELETE = "delete"
    RMDIR = "rmdir"


class AuditStatus(StrEnum):
    OK = "OK"
    WARN = "WARN"
    FAIL = "FAIL"


# Every extension the scanner picks up
DISC_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".cue",
        ".iso",
        ".img",
        ".chd",
        ".bin",
        ".wav",
        ".pbp",
    }
)

# Full-disc images -- the only first-class playlist entries
MASTER_EXTENSIONS: frozenset[str] = frozenset({".cue", ".iso", ".img", ".chd"})

# Raw tracks, only meaningful next to a cue sheet
TRACK_EXTENSIONS: frozenset[str] = frozenset({".bin", ".wav"})

PLAYLIST_EXTENSION = ".m3u"

# Handlers run in this order within a group so cues claim their tracks first
DISPATCH_ORDER: tuple[DiscKind, ...] = (
    DiscKind.CUE,
    DiscKind.IMAGE,
    DiscKind.TRACK,
    DiscKind.PLAYLIST,
)


def kind_for(path: Path) -> DiscKind:
    """Classify a path by extension."""
    ext = path.suffix.lower()
    if ext == ".cue":
        return DiscKind.CUE
    if ext in TRACK_EXTENSIONS:
        return DiscKind.TRACK
    if ext == PLAYLIST_EXTENSION:
        return DiscKind.PLAYLIST
    return DiscKind.IMAGE


def is_master(path: Path) -> bool:
    return path.suffix.lower() in MASTER_EXTENSIONS


@dataclass
class DiscFile:
    """A disc-image file found by the scanner."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        return self.path.suffix.lower()

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def kind(self) -> DiscKind:
        return kind_for(self.path)

    @property
    def is_master(self) -> bool:
        return is_master(self.path)


@dataclass
class GameGroup:
    """All disc files sharing one canonical title."""

    title: str
    files: list[DiscFile] = field(default_factory=list)

    @property
    def masters(self) -> list[DiscFile]:
        return sorted((f for f in self.files if f.is_master), key=lambda f: f.path)

    @property
    def is_multi_disc(self) -> bool:
        return len(self.masters) >= 2

    @property
    def source_dirs(self) -> list[Path]:
        return sorted({f.directory for f in self.files})


@dataclass(frozen=True)
class FileAction:
    """One filesystem mutation (performed, or planned in dry-run mode)."""

    kind: ActionKind
    source: Path
    dest: Path | None = None

    def __str__(self) -> str:
        if self.dest is not None:
            return f"{self.kind} {self.source} -> {self.dest}"
        return f"{self.kind} {self.source}"


@dataclass
class CueRewrite:
    """Outcome of rewriting one cue sheet's FILE references."""

    cue: Path
    tracks: list[Path] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)
    changed: bool = False


@dataclass
class AuditResult:
    """Classification of a single playlist."""

    playlist: Path
    status: AuditStatus
    missing: int = 0
    cue_errors: int = 0
    reason: str = ""

    @property
    def details(self) -> str:
        if self.reason:
            return self.reason
        if self.status == AuditStatus.OK:
            return ""
        return f"missing={self.missing} cue_errors={self.cue_errors}"


@dataclass
class RunSummary:
    """Everything a run produced, merged from the organize and repair passes."""

    groups: int = 0
    errors: int = 0
    actions: list[FileAction] = field(default_factory=list)
    playlists: set[Path] = field(default_factory=set)
    unresolved: dict[Path, list[str]] = field(default_factory=dict)
    audit: AuditReport | None = None

    @property
    def failed(self) -> bool:
        return self.audit is not None and self.audit.fail_count > 0

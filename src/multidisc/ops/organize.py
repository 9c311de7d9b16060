"""Move each title's disc files into its target directory.

Target policy: a group with two or more master discs gets a subdirectory of
the root named after its title; everything else lives directly in the root.
Relocation is idempotent -- a file already at its destination, or already
moved by an earlier (possibly interrupted) run, is a no-op.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from ..models import DISPATCH_ORDER, CueRewrite, DiscFile, DiscKind, GameGroup
from .cue import claimed_tracks, rewrite_cue
from .fs import FileOps
from .grouping import canonical_title

log = logger.bind(stage="organize")


@dataclass
class GroupOutcome:
    """Where a group's files ended up."""

    title: str
    target_dir: Path
    masters: list[Path] = field(default_factory=list)
    cues: list[CueRewrite] = field(default_factory=list)


def directory_masters(directory: Path, ops: FileOps, title: str | None = None) -> list[Path]:
    """Master discs currently in directory, minus data files a cue claims.

    With title, only masters whose canonical title matches it count.
    """
    if not ops.is_dir(directory):
        return []
    listing = [DiscFile(p) for p in ops.list_dir(directory) if not ops.is_dir(p)]
    claimed = claimed_tracks(listing, ops)
    masters = [d.path for d in listing if d.is_master and d.path not in claimed]
    if title is not None:
        masters = [p for p in masters if canonical_title(p.stem) == title]
    return sorted(masters)


def target_dir_for(group: GameGroup, root: Path, existing: Iterable[Path] = ()) -> Path:
    """root/title for a multi-disc title, root otherwise.

    existing lists masters already organized under root/title; a new disc
    of an organized title joins them there.
    """
    names = {m.name for m in group.masters} | {p.name for p in existing}
    if group.is_multi_disc or len(names) >= 2:
        return root / group.title
    return root


def relocate(source: Path, target_dir: Path, ops: FileOps) -> Path | None:
    """Move source into target_dir, keeping its file name.

    Returns the destination path, or None when source is already gone.
    """
    dest = target_dir / source.name
    if not ops.exists(source):
        log.debug(f"Already relocated: {source}")
        return None
    if source == dest:
        log.debug(f"In place: {source}")
        return dest
    ops.mkdir(target_dir)
    ops.move(source, dest)
    return dest


# ---------------------------------------------------------------------------
# Per-kind handlers
# ---------------------------------------------------------------------------

Handler = Callable[[DiscFile, Path, FileOps, GroupOutcome], Path | None]


def _relocate_cue(disc: DiscFile, target_dir: Path, ops: FileOps, outcome: GroupOutcome) -> Path | None:
    dest = relocate(disc.path, target_dir, ops)
    if dest is not None and dest != disc.path:
        outcome.cues.append(rewrite_cue(disc.path, dest, ops, relocate))
    return dest


def _relocate_plain(disc: DiscFile, target_dir: Path, ops: FileOps, outcome: GroupOutcome) -> Path | None:
    return relocate(disc.path, target_dir, ops)


HANDLERS: dict[DiscKind, Handler] = {
    DiscKind.CUE: _relocate_cue,
    DiscKind.IMAGE: _relocate_plain,
    DiscKind.TRACK: _relocate_plain,
    DiscKind.PLAYLIST: _relocate_plain,
}


def relocate_and_fix(disc: DiscFile, target_dir: Path, ops: FileOps, outcome: GroupOutcome) -> Path | None:
    """Dispatch one file to the handler for its kind."""
    return HANDLERS[disc.kind](disc, target_dir, ops, outcome)


def organize_group(group: GameGroup, root: Path, ops: FileOps) -> GroupOutcome:
    """Relocate every file of a group into its target directory.

    Cue sheets go first so their tracks travel with them. Masters already
    in the title directory (from an earlier run) count towards the group.
    """
    existing = directory_masters(root / group.title, ops, title=group.title)
    target_dir = target_dir_for(group, root, existing)
    outcome = GroupOutcome(title=group.title, target_dir=target_dir)
    log.debug(
        f"organize_group: '{group.title}' files={len(group.files)} "
        f"masters={len(group.masters)} -> {target_dir}"
    )

    rank = {kind: i for i, kind in enumerate(DISPATCH_ORDER)}
    ordered = sorted(group.files, key=lambda d: (rank[d.kind], d.path))
    for disc in ordered:
        relocate_and_fix(disc, target_dir, ops, outcome)

    outcome.masters = sorted(
        {target_dir / m.name for m in group.masters}
        | {p for p in existing if p.parent == target_dir}
    )
    return outcome


def prune_empty_dirs(directories: list[Path], root: Path, keep: Path, ops: FileOps) -> list[Path]:
    """Remove directories emptied by this run, walking up towards root.

    Never removes root or keep (the group's target directory).
    """
    removed: list[Path] = []
    for directory in sorted(directories, key=lambda p: len(p.parts), reverse=True):
        current = directory
        while current != root and current != keep and root in current.parents:
            if not ops.is_dir(current) or ops.list_dir(current):
                break
            ops.rmdir(current)
            removed.append(current)
            current = current.parent
    return removed

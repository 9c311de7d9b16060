"""Create, repair, and remove per-title .m3u playlists.

A playlist lists every master disc (cue/iso/img/chd) of a multi-disc title,
one file name per line in ascending order, newline-terminated. Data tracks
(bin/wav) never appear. Titles with fewer than two masters have no playlist.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from ..models import PLAYLIST_EXTENSION, DiscFile
from .fs import FileOps
from .organize import GroupOutcome, directory_masters, relocate_and_fix
from .scan import find_playlists

log = logger.bind(stage="playlist")


def playlist_path(directory: Path, title: str) -> Path:
    return directory / f"{title}{PLAYLIST_EXTENSION}"


def render_playlist(entries: list[str]) -> str:
    return "".join(f"{entry}\n" for entry in entries)


def create_playlist(title: str, target_dir: Path, masters: list[Path], ops: FileOps) -> Path | None:
    """Write the playlist for a multi-disc title; None for single-disc titles."""
    if len(masters) < 2:
        return None
    path = playlist_path(target_dir, title)
    entries = [m.name for m in sorted(masters)]
    ops.write_text(path, render_playlist(entries))
    log.debug(f"create_playlist: {path.name} ({len(entries)} discs)")
    return path


def remove_stale_playlists(title: str, root: Path, ops: FileOps) -> list[Path]:
    """Delete playlists left over from when a title had several discs.

    A playlist whose directory still holds two or more of its masters is
    kept; the repair pass owns it.
    """
    removed = []
    for candidate in (playlist_path(root, title), playlist_path(root / title, title)):
        if not ops.exists(candidate):
            continue
        if len(current_masters(candidate, ops)) >= 2:
            log.debug(f"Keeping {candidate}: its directory still holds several discs")
            continue
        ops.delete(candidate)
        removed.append(candidate)
    return removed


def sync_group_playlist(outcome: GroupOutcome, root: Path, ops: FileOps) -> Path | None:
    """Organize-pass playlist step for one group."""
    if len(outcome.masters) >= 2:
        return create_playlist(outcome.title, outcome.target_dir, outcome.masters, ops)
    remove_stale_playlists(outcome.title, root, ops)
    return None


def _normalize_location(playlist: Path, ops: FileOps) -> Path:
    """Move a loose playlist into the sibling directory named after it."""
    title = playlist.stem
    if playlist.parent.name == title:
        return playlist
    sibling = playlist.parent / title
    if not ops.is_dir(sibling):
        return playlist
    outcome = GroupOutcome(title=title, target_dir=sibling)
    return relocate_and_fix(DiscFile(playlist), sibling, ops, outcome) or playlist


def current_masters(playlist: Path, ops: FileOps) -> list[Path]:
    """Masters a playlist should list, given its current directory.

    Inside its own title directory every master counts; a loose playlist
    only claims masters whose canonical title matches its name. Data files
    referenced by a cue sheet are never listed.
    """
    title = playlist.stem
    directory = playlist.parent
    return directory_masters(directory, ops, title=None if directory.name == title else title)


def repair_playlists(
    root: Path,
    ops: FileOps,
    recurse: bool = False,
    skip: set[Path] | frozenset[Path] = frozenset(),
) -> set[Path]:
    """Bring every existing playlist in line with its directory.

    Playlists in skip (just written by the organize pass) are left alone.
    Returns the playlists that survive.
    """
    survivors: set[Path] = set()
    for found in find_playlists(root, recurse):
        if found in skip or not ops.exists(found):
            continue
        playlist = _normalize_location(found, ops)
        masters = current_masters(playlist, ops)

        if len(masters) < 2:
            log.info(f"Removing playlist with {len(masters)} master(s): {playlist}")
            ops.delete(playlist)
            continue

        expected = [m.name for m in masters]
        text = ops.read_text(playlist)
        current = [line.strip() for line in text.splitlines() if line.strip()]
        if current != expected or not text.endswith("\n"):
            log.info(
                f"Repairing playlist: {playlist} "
                f"({len(current)} -> {len(expected)} entries)"
            )
            ops.write_text(playlist, render_playlist(expected))
        survivors.add(playlist)
    return survivors

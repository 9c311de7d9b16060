"""Keep cue sheet FILE references valid when a cue sheet moves.

A FILE line names a sibling track: FILE "Game (Track 1).bin" BINARY. When the
cue moves, each referenced track is relocated next to it and the line is
rewritten to the track's bare file name with the BINARY type. Lines that are
not FILE references pass through unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from pathlib import Path, PureWindowsPath

from loguru import logger

from ..errors import CueReferenceError
from ..models import CueRewrite, DiscFile
from .fs import FileOps

log = logger.bind(stage="cue")

# FILE "name with spaces.bin" BINARY  |  FILE name.bin BINARY
FILE_LINE_RE = re.compile(
    r'^\s*FILE\s+(?:"(?P<quoted>[^"]+)"|(?P<bare>\S+))(?:\s+(?P<type>\S+))?\s*$',
    re.IGNORECASE,
)


def parse_file_refs(text: str) -> list[str]:
    """Return the raw FILE reference names in cue sheet text, in order."""
    refs = []
    for line in text.splitlines():
        m = FILE_LINE_RE.match(line)
        if m:
            refs.append(m.group("quoted") or m.group("bare"))
    return refs


def reference_name(reference: str) -> str:
    """Bare file name of a reference that may carry a / or \\ path."""
    return PureWindowsPath(reference).name


def read_cue(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="surrogateescape")


def resolve_reference(cue: Path, reference: str, ops: FileOps | None = None) -> Path | None:
    """Resolve a FILE reference against the cue's own directory."""
    exists = ops.exists if ops else Path.exists
    name = reference_name(reference)
    for candidate in (cue.parent / reference.replace("\\", "/"), cue.parent / name):
        if exists(candidate):
            return candidate
    return None


def dangling_references(cue: Path) -> list[str]:
    """FILE references of an on-disk cue sheet that do not resolve."""
    try:
        refs = parse_file_refs(read_cue(cue))
    except OSError as e:
        log.warning(f"Cannot read cue sheet {cue}: {e}")
        return []
    return [ref for ref in refs if resolve_reference(cue, ref) is None]


def claimed_tracks(files: Iterable[DiscFile], ops: FileOps | None = None) -> set[Path]:
    """Paths of every file referenced by one of the given cue sheets.

    A referenced .img or .iso is claimed like a .bin: the cue sheet is the
    disc, and its data files never count as discs of their own. With ops,
    cue sheets are read through the planned (dry-run) tree.
    """
    read = ops.read_text if ops else read_cue
    claimed: set[Path] = set()
    for disc in files:
        if disc.extension != ".cue":
            continue
        try:
            refs = parse_file_refs(read(disc.path))
        except OSError as e:
            log.warning(f"Cannot read cue sheet {disc.path}: {e}")
            continue
        for ref in refs:
            track = resolve_reference(disc.path, ref, ops)
            if track is not None:
                claimed.add(track)
    return claimed


def _locate_track(old_cue: Path, new_cue: Path, reference: str, ops: FileOps) -> Path:
    """Find a referenced track, preferring the cue's pre-move directory.

    Raises CueReferenceError when the track is in neither place.
    """
    track = resolve_reference(old_cue, reference, ops)
    if track is not None:
        return track
    co_located = new_cue.parent / reference_name(reference)
    if ops.exists(co_located):
        return co_located
    raise CueReferenceError(new_cue, reference)


def rewrite_cue(
    old_path: Path,
    new_path: Path,
    ops: FileOps,
    relocate: Callable[[Path, Path, FileOps], Path | None],
) -> CueRewrite:
    """Relocate a moved cue's tracks next to it and rewrite its FILE lines.

    relocate(track, target_dir, ops) moves one track and returns its new path.
    Unresolvable references are logged, left as written, and listed in
    CueRewrite.unresolved.
    """
    result = CueRewrite(cue=new_path)
    text = ops.read_text(new_path)

    out_lines = []
    for line in text.splitlines():
        m = FILE_LINE_RE.match(line)
        if not m:
            out_lines.append(line)
            continue
        reference = m.group("quoted") or m.group("bare")
        try:
            track = _locate_track(old_path, new_path, reference, ops)
        except CueReferenceError as e:
            log.warning(f"{e} -- leaving FILE line unchanged")
            result.unresolved.append(reference)
            out_lines.append(line)
            continue
        moved = relocate(track, new_path.parent, ops) or new_path.parent / track.name
        result.tracks.append(moved)
        out_lines.append(f'FILE "{moved.name}" BINARY')

    new_text = "\n".join(out_lines)
    if text.endswith(("\n", "\r")):
        new_text += "\n"
    result.changed = ops.write_text(new_path, new_text)
    log.debug(
        f"rewrite_cue: {new_path.name} tracks={len(result.tracks)} "
        f"unresolved={len(result.unresolved)} changed={result.changed}"
    )
    return result

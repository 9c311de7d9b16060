"""Enumerate candidate disc files under a root directory."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from ..models import DISC_EXTENSIONS, PLAYLIST_EXTENSION, DiscFile

log = logger.bind(stage="scan")


def scan(root: Path, recurse: bool = False) -> list[DiscFile]:
    """Find every supported disc file under root, sorted by full path.

    Without recurse only the root's direct children are considered.
    """
    found: list[DiscFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        if not recurse:
            dirnames.clear()
        for name in filenames:
            if Path(name).suffix.lower() in DISC_EXTENSIONS:
                found.append(DiscFile(Path(dirpath) / name))
    found.sort(key=lambda f: f.path)
    log.debug(f"scan: {len(found)} disc files under {root} (recurse={recurse})")
    return found


def find_playlists(root: Path, recurse: bool = False) -> list[Path]:
    """Find existing .m3u playlists under root, sorted by full path."""
    if recurse:
        candidates = root.rglob(f"*{PLAYLIST_EXTENSION}")
    else:
        candidates = root.glob(f"*{PLAYLIST_EXTENSION}")
    return sorted(p for p in candidates if p.is_file())

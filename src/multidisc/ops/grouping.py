"""Recover canonical game titles from disc filenames and cluster by title.

A tag is a disc/part/track indicator such as "(Disc 2)", "CD1", "Part II",
"- Track 01" or "[Disc One of Two]". Stripping every tag (and the separators
around it) from a base name yields the canonical title used as group key.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from loguru import logger

from ..models import DiscFile, GameGroup

log = logger.bind(stage="grouping")

_NUMBER_WORDS = (
    "one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve"
)
_ROMAN = r"(?=[ivx])x{0,3}(?:ix|iv|v?i{0,3})"
_INDEX = rf"(?:\d{{1,2}}|{_NUMBER_WORDS}|{_ROMAN})"
_SEP = r"[\s._-]"

# Single-letter tags (D1, P2) only take numeric indices: "Pi" or "Dx"
# are words, not tags.
TAG_PATTERN = re.compile(
    rf"{_SEP}*"
    r"[(\[{]?"
    r"(?<![a-z0-9])"
    rf"(?:(?:disc|disk|cd|part|track){_SEP}*{_INDEX}"
    rf"|(?:d|p){_SEP}*\d{{1,2}})"
    rf"(?:{_SEP}*of{_SEP}*{_INDEX})?"
    r"(?![a-z0-9])"
    r"[)\]}]?"
    rf"{_SEP}*",
    re.IGNORECASE,
)

_EDGE_CHARS = " \t._-"


def canonical_title(base_name: str) -> str:
    """Strip disc/part/track tags from a base name (no extension).

    Falls back to the trimmed base name when stripping leaves nothing,
    e.g. a file literally named "Disc 1".
    """
    stripped = TAG_PATTERN.sub(" ", base_name)
    stripped = re.sub(r"\s{2,}", " ", stripped).strip(_EDGE_CHARS)
    if not stripped:
        fallback = base_name.strip(_EDGE_CHARS) or base_name
        log.debug(f"canonical_title: '{base_name}' is all tags, keeping '{fallback}'")
        return fallback
    return stripped


def group_by_title(
    files: Iterable[DiscFile],
    exclude: set | frozenset = frozenset(),
) -> dict[str, GameGroup]:
    """Cluster disc files by canonical title, ordered by title.

    Paths in exclude (tracks owned by a cue sheet) are left out; they move
    with their cue instead.
    """
    groups: dict[str, GameGroup] = {}
    for disc in files:
        if disc.path in exclude:
            continue
        title = canonical_title(disc.stem)
        groups.setdefault(title, GameGroup(title=title)).files.append(disc)
    ordered = {title: groups[title] for title in sorted(groups)}
    log.debug(f"group_by_title: {len(ordered)} titles")
    return ordered

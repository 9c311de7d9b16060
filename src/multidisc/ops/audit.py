"""Read-only integrity audit of the final playlists.

Each playlist is classified:

OK   -- every entry resolves and every referenced cue sheet's FILE lines resolve
WARN -- every entry resolves, but at least one cue has a dangling FILE reference
FAIL -- the playlist is missing, is a single unterminated line, or has at
        least one entry that does not resolve
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from ..models import AuditResult, AuditStatus
from .cue import dangling_references

log = logger.bind(stage="audit")


@dataclass
class AuditReport:
    """Aggregated audit results, ordered by playlist path."""

    root: Path
    results: list[AuditResult] = field(default_factory=list)

    def count(self, status: AuditStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def ok_count(self) -> int:
        return self.count(AuditStatus.OK)

    @property
    def warn_count(self) -> int:
        return self.count(AuditStatus.WARN)

    @property
    def fail_count(self) -> int:
        return self.count(AuditStatus.FAIL)

    def to_dict(self) -> dict:
        return {
            "root": str(self.root),
            "summary": {
                "total": len(self.results),
                "ok": self.ok_count,
                "warn": self.warn_count,
                "fail": self.fail_count,
            },
            "playlists": [
                {
                    "playlist": _display_name(r.playlist, self.root),
                    "status": str(r.status),
                    "missing": r.missing,
                    "cue_errors": r.cue_errors,
                    "reason": r.reason,
                }
                for r in self.results
            ],
        }


def _display_name(playlist: Path, root: Path) -> str:
    try:
        return str(playlist.relative_to(root))
    except ValueError:
        return str(playlist)


def audit_playlist(playlist: Path) -> AuditResult:
    """Classify one playlist against the files on disk."""
    if not playlist.is_file():
        return AuditResult(playlist, AuditStatus.FAIL, reason="playlist missing")

    raw = playlist.read_text(encoding="utf-8", errors="surrogateescape")
    if "\n" not in raw and "\r" not in raw:
        return AuditResult(playlist, AuditStatus.FAIL, reason="malformed")

    missing = 0
    cue_errors = 0
    for line in raw.splitlines():
        entry = line.strip()
        if not entry:
            continue
        target = playlist.parent / entry
        if not target.exists():
            log.debug(f"{playlist.name}: missing entry {entry}")
            missing += 1
            continue
        if target.suffix.lower() == ".cue":
            dangling = dangling_references(target)
            for ref in dangling:
                log.debug(f"{target.name}: dangling FILE reference {ref}")
            cue_errors += len(dangling)

    if missing:
        status = AuditStatus.FAIL
    elif cue_errors:
        status = AuditStatus.WARN
    else:
        status = AuditStatus.OK
    return AuditResult(playlist, status, missing=missing, cue_errors=cue_errors)


def run_audit(root: Path, playlists: Iterable[Path]) -> AuditReport:
    """Audit every known playlist. Never mutates the filesystem."""
    report = AuditReport(root=root)
    for playlist in sorted(set(playlists)):
        result = audit_playlist(playlist)
        if result.status != AuditStatus.OK:
            log.warning(f"{result.status} {playlist.name} {result.details}")
        report.results.append(result)
    log.info(
        f"Audit: {len(report.results)} playlists, ok={report.ok_count} "
        f"warn={report.warn_count} fail={report.fail_count}"
    )
    return report


def format_audit_table(report: AuditReport) -> str:
    """Render `<STATUS> <playlist-name> [<details>]` lines plus a summary."""
    lines = []
    for r in report.results:
        name = _display_name(r.playlist, report.root)
        details = f" [{r.details}]" if r.details else ""
        lines.append(f"{r.status:<4} {name}{details}")
    lines.append(
        f"{len(report.results)} playlists: {report.ok_count} OK, "
        f"{report.warn_count} WARN, {report.fail_count} FAIL"
    )
    return "\n".join(lines)

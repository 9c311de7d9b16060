"""Organizer runner -- scan, group, organize, repair, audit."""

from __future__ import annotations

from pathlib import Path

import click
from loguru import logger

from .config import OrganizerConfig
from .models import ActionKind, GameGroup, RunSummary
from .ops.audit import run_audit
from .ops.cue import claimed_tracks
from .ops.fs import FileOps
from .ops.grouping import group_by_title
from .ops.organize import organize_group, prune_empty_dirs
from .ops.playlist import repair_playlists, sync_group_playlist
from .ops.scan import scan

log = logger.bind(stage="runner")


class OrganizerRunner:
    """Runs one organize pass over a root directory."""

    def __init__(self, config: OrganizerConfig) -> None:
        self.config = config

    def run(self) -> RunSummary:
        """Organize the configured root and return what happened.

        Raises RootNotFoundError before touching anything when the root
        does not exist.
        """
        root = self.config.validate_root()
        ops = FileOps(dry_run=self.config.dry_run)

        files = scan(root, recurse=self.config.recurse)
        claimed = claimed_tracks(files)
        groups = group_by_title(files, exclude=claimed)
        click.echo(f"Organize: {len(groups)} titles ({len(files)} files) in {root}")
        if self.config.dry_run:
            click.echo("[DRY-RUN] No changes will be made")

        summary = RunSummary(groups=len(groups))
        created = self._organize_pass(root, groups, ops, summary)
        repaired = repair_playlists(
            root, ops, recurse=self.config.recurse, skip=created
        )
        summary.playlists = created | repaired
        summary.actions = ops.actions

        if self.config.dry_run:
            log.debug("Dry run: audit skipped")
        elif self.config.audit:
            summary.audit = run_audit(root, summary.playlists)

        click.echo(
            f"\nOrganize complete: {len(summary.actions)} file operations, "
            f"{len(summary.playlists)} playlists, {summary.errors} errors"
        )
        return summary

    def _organize_pass(
        self,
        root: Path,
        groups: dict[str, GameGroup],
        ops: FileOps,
        summary: RunSummary,
    ) -> set[Path]:
        """Relocate each group and write its playlist. Returns playlists written."""
        created: set[Path] = set()
        for title, group in groups.items():
            start = len(ops.actions)
            try:
                outcome = organize_group(group, root, ops)
                for rewrite in outcome.cues:
                    if rewrite.unresolved:
                        summary.unresolved[rewrite.cue] = list(rewrite.unresolved)
                playlist = sync_group_playlist(outcome, root, ops)
                if playlist is not None:
                    created.add(playlist)
                vacated = set(group.source_dirs) | {
                    a.source.parent
                    for a in ops.actions[start:]
                    if a.kind == ActionKind.MOVE
                }
                prune_empty_dirs(sorted(vacated), root, outcome.target_dir, ops)
            except OSError as e:
                summary.errors += 1
                log.error(f"Failed to organize '{title}': {e}")
                click.echo(f"  ERROR: {title}: {e}")
                continue

            done = len(ops.actions) - start
            if done:
                discs = len(outcome.masters)
                click.echo(
                    f"  {title}: {discs} disc(s) -> "
                    f"{_relative(outcome.target_dir, root)} ({done} operations)"
                )
                for rewrite in outcome.cues:
                    for ref in rewrite.unresolved:
                        click.echo(
                            f"    WARNING: {rewrite.cue.name}: "
                            f"unresolved FILE reference '{ref}'"
                        )
            else:
                log.debug(f"'{title}' already organized")
        return created


def _relative(path: Path, root: Path) -> str:
    rel = path.relative_to(root)
    return "." if rel == Path(".") else str(rel)

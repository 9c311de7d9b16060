"""File operations for the multi-disc organizer.

Submodules:
    fs       -- FileOps, the single gateway for filesystem mutations. Records
                every move/mkdir/write/delete/rmdir as a FileAction; in dry-run
                mode logs "[DRY-RUN] Would ..." and applies the change to an
                in-memory overlay so later steps see the planned tree.
    scan     -- Sorted discovery of disc files (cue/iso/img/chd/bin/wav/pbp)
                and existing .m3u playlists, optionally recursive.
    grouping -- canonical_title() strips disc/part/track tags (numeric, roman,
                and spelled-out indices, optional "of N") with one regex;
                group_by_title() clusters files into GameGroups ordered by title.
    organize -- Target-directory policy (subdirectory only for >=2 masters),
                idempotent relocate(), per-kind handler table, and pruning of
                directories emptied by the run.
    cue      -- FILE line parsing and rewriting. Moves referenced tracks next
                to a relocated cue; unresolvable references are logged and
                left as written.
    playlist -- Organize-pass creation/removal and the repair pass over all
                existing playlists (relocate loose ones, rewrite drifted
                content, delete playlists with fewer than two masters).
    audit    -- Read-only OK/WARN/FAIL classification of playlists.
"""

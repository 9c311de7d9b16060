"""Multi-disc organizer -- group disc-image dumps per title, keep cue sheets
valid, and maintain .m3u playlists for multi-disc games.

Core modules:
    config  -- Organizer configuration via pydantic-settings (MULTIDISC_* env vars)
    cli     -- Click CLI entry point. CLI flags passed as kwargs to
               OrganizerConfig (no env pollution).
    runner  -- Run orchestration: scan -> group -> organize -> repair -> audit
    models  -- Enums, extension sets, and run data types
    errors  -- Exception hierarchy rooted at OrganizerError

Subpackages:
    ops -- File operations (scanning, title grouping, relocation, cue
           rewriting, playlist maintenance, audit)
"""

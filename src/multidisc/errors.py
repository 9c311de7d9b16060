"""Exception hierarchy for the multi-disc organizer."""

from pathlib import Path


class OrganizerError(Exception):
    """Base exception for all organizer errors."""


class ConfigError(OrganizerError):
    """Invalid or missing configuration."""


class RootNotFoundError(ConfigError):
    """The root directory to organize does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Root path does not exist or is not a directory: {path}")
        self.path = path


class CueReferenceError(OrganizerError):
    """A cue sheet names a track file that cannot be found."""

    def __init__(self, cue: Path, reference: str) -> None:
        super().__init__(f"{cue.name}: referenced track not found: {reference}")
        self.cue = cue
        self.reference = reference

"""Organizer configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import RootNotFoundError


class OrganizerConfig(BaseSettings):
    """All organizer configuration with layered resolution:
    .env file < MULTIDISC_* environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MULTIDISC_",
        extra="ignore",
    )

    # -- Scan --
    root: Path = Path(".")
    recurse: bool = False

    # -- Behavior --
    dry_run: bool = False
    audit: bool = True
    verbose: bool = False

    # -- Logging --
    log_level: str = "INFO"
    log_dir: Path | None = None

    def validate_root(self) -> Path:
        """Resolve the root directory, failing before any scan or mutation."""
        root = self.root.expanduser().resolve()
        if not root.is_dir():
            raise RootNotFoundError(root)
        return root

    def setup_logging(self) -> None:
        """Configure loguru for the organizer."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<10} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        level = "DEBUG" if self.verbose else self.log_level.upper()
        logger.add(
            sys.stderr,
            format=log_format,
            level=level,
            filter=_default_extra,
        )

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            logger.add(
                str(self.log_dir / "multidisc.log"),
                format=log_format,
                level="DEBUG",
                rotation="10 MB",
                retention="30 days",
                filter=_default_extra,
            )

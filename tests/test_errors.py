"""Tests for errors.py -- exception hierarchy."""

from pathlib import Path

from multidisc.errors import (
    ConfigError,
    CueReferenceError,
    OrganizerError,
    RootNotFoundError,
)


class TestExceptionHierarchy:
    def test_all_inherit_from_organizer_error(self):
        assert issubclass(ConfigError, OrganizerError)
        assert issubclass(RootNotFoundError, ConfigError)
        assert issubclass(CueReferenceError, OrganizerError)

    def test_organizer_error_is_exception(self):
        assert issubclass(OrganizerError, Exception)


class TestAttributes:
    def test_root_not_found(self):
        err = RootNotFoundError(Path("/nope"))
        assert err.path == Path("/nope")
        assert "/nope" in str(err)

    def test_cue_reference(self):
        err = CueReferenceError(Path("/r/Game.cue"), "Game.bin")
        assert err.cue == Path("/r/Game.cue")
        assert err.reference == "Game.bin"
        assert "Game.cue" in str(err)
        assert "Game.bin" in str(err)

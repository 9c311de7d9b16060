"""Tests for ops/cue.py -- FILE reference parsing and rewriting."""

from __future__ import annotations

from pathlib import Path

from multidisc.models import DiscFile
from multidisc.ops.cue import (
    claimed_tracks,
    dangling_references,
    parse_file_refs,
    reference_name,
    rewrite_cue,
)
from multidisc.ops.fs import FileOps
from multidisc.ops.organize import relocate

CUE_TWO_TRACKS = (
    'FILE "Game (Track 1).bin" BINARY\n'
    "  TRACK 01 MODE2/2352\n"
    "    INDEX 01 00:00:00\n"
    'FILE "Game (Track 2).bin" WAVE\n'
    "  TRACK 02 AUDIO\n"
    "    INDEX 01 00:00:00\n"
)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def _move_cue(old: Path, new_dir: Path, ops: FileOps) -> Path:
    new = relocate(old, new_dir, ops)
    assert new is not None
    return new


class TestParseFileRefs:
    def test_quoted_and_bare(self):
        text = 'FILE "a b.bin" BINARY\nFILE c.bin BINARY\n  TRACK 01 AUDIO\n'
        assert parse_file_refs(text) == ["a b.bin", "c.bin"]

    def test_case_insensitive_keyword(self):
        assert parse_file_refs('file "x.bin" binary') == ["x.bin"]

    def test_no_refs(self):
        assert parse_file_refs("REM GENRE Action\n") == []

    def test_reference_name_strips_paths(self):
        assert reference_name("..\\dump\\Game.bin") == "Game.bin"
        assert reference_name("dump/Game.bin") == "Game.bin"


class TestRewriteCue:
    def test_moves_tracks_and_rewrites_lines(self, tmp_path):
        old = _write(tmp_path / "Game.cue", CUE_TWO_TRACKS)
        _write(tmp_path / "Game (Track 1).bin", "t1")
        _write(tmp_path / "Game (Track 2).bin", "t2")
        ops = FileOps()
        new = _move_cue(old, tmp_path / "Game", ops)

        result = rewrite_cue(old, new, ops, relocate)

        assert result.unresolved == []
        assert [t.name for t in result.tracks] == ["Game (Track 1).bin", "Game (Track 2).bin"]
        assert (tmp_path / "Game" / "Game (Track 2).bin").read_text() == "t2"
        lines = new.read_text().splitlines()
        assert lines[0] == 'FILE "Game (Track 1).bin" BINARY'
        # Type is normalized to BINARY regardless of original
        assert lines[3] == 'FILE "Game (Track 2).bin" BINARY'
        assert lines[1] == "  TRACK 01 MODE2/2352"
        assert new.read_text().endswith("\n")
        assert result.changed is True

    def test_path_reference_rewritten_to_bare_name(self, tmp_path):
        old = _write(tmp_path / "Game.cue", 'FILE "dump\\Game.bin" BINARY\n')
        _write(tmp_path / "dump" / "Game.bin", "t")
        ops = FileOps()
        new = _move_cue(old, tmp_path / "Game", ops)

        rewrite_cue(old, new, ops, relocate)

        assert new.read_text() == 'FILE "Game.bin" BINARY\n'
        assert (tmp_path / "Game" / "Game.bin").exists()

    def test_track_already_co_located(self, tmp_path):
        old = tmp_path / "Game.cue"
        new = _write(tmp_path / "Game" / "Game.cue", 'FILE "Game.bin" BINARY\n')
        _write(tmp_path / "Game" / "Game.bin", "t")
        ops = FileOps()

        result = rewrite_cue(old, new, ops, relocate)

        assert result.unresolved == []
        assert result.changed is False
        assert ops.actions == []

    def test_unresolved_reference_left_unchanged(self, tmp_path):
        text = 'FILE "Missing.bin" MOTOROLA\n  TRACK 01 AUDIO\n'
        old = _write(tmp_path / "Game.cue", text)
        ops = FileOps()
        new = _move_cue(old, tmp_path / "Game", ops)

        result = rewrite_cue(old, new, ops, relocate)

        assert result.unresolved == ["Missing.bin"]
        assert result.tracks == []
        assert new.read_text() == text

    def test_non_utf8_bytes_survive(self, tmp_path):
        old = tmp_path / "Game.cue"
        old.write_bytes(b'REM COMMENT "Caf\xe9"\nFILE "Game.bin" WAVE\n')
        _write(tmp_path / "Game.bin", "t")
        ops = FileOps()
        new = _move_cue(old, tmp_path / "Game", ops)

        rewrite_cue(old, new, ops, relocate)

        assert new.read_bytes() == b'REM COMMENT "Caf\xe9"\nFILE "Game.bin" BINARY\n'

    def test_crlf_line_endings_become_lf(self, tmp_path):
        old = tmp_path / "Game.cue"
        old.write_bytes(b'FILE "Game.bin" BINARY\r\n  TRACK 01 MODE1/2352\r\n')
        _write(tmp_path / "Game.bin", "t")
        ops = FileOps()
        new = _move_cue(old, tmp_path / "Game", ops)

        rewrite_cue(old, new, ops, relocate)

        assert new.read_bytes() == b'FILE "Game.bin" BINARY\n  TRACK 01 MODE1/2352\n'

    def test_dry_run_reads_planned_location(self, tmp_path):
        old = _write(tmp_path / "Game.cue", 'FILE "Game.bin" WAVE\n')
        _write(tmp_path / "Game.bin", "t")
        ops = FileOps(dry_run=True)
        new = _move_cue(old, tmp_path / "Game", ops)

        result = rewrite_cue(old, new, ops, relocate)

        assert result.unresolved == []
        assert result.tracks == [tmp_path / "Game" / "Game.bin"]
        assert old.read_text() == 'FILE "Game.bin" WAVE\n'
        assert not (tmp_path / "Game").exists()


class TestDanglingAndClaimed:
    def test_dangling_references(self, tmp_path):
        cue = _write(tmp_path / "Game.cue", CUE_TWO_TRACKS)
        _write(tmp_path / "Game (Track 1).bin", "t1")
        assert dangling_references(cue) == ["Game (Track 2).bin"]

    def test_claimed_tracks(self, tmp_path):
        cue = _write(tmp_path / "Game.cue", 'FILE "data.bin" BINARY\nFILE "gone.bin" BINARY\n')
        _write(tmp_path / "data.bin", "t")
        files = [DiscFile(cue), DiscFile(tmp_path / "data.bin"), DiscFile(tmp_path / "x.iso")]
        assert claimed_tracks(files) == {tmp_path / "data.bin"}

    def test_referenced_data_image_is_claimed(self, tmp_path):
        cue = _write(tmp_path / "Game.cue", 'FILE "Game.img" BINARY\n')
        _write(tmp_path / "Game.img", "d")
        _write(tmp_path / "Other.iso", "o")
        files = [DiscFile(cue), DiscFile(tmp_path / "Game.img"), DiscFile(tmp_path / "Other.iso")]
        assert claimed_tracks(files) == {tmp_path / "Game.img"}

    def test_claimed_through_planned_tree(self, tmp_path):
        old = _write(tmp_path / "Game.cue", 'FILE "Game.img" BINARY\n')
        _write(tmp_path / "Game.img", "d")
        ops = FileOps(dry_run=True)
        new = _move_cue(old, tmp_path / "Game", ops)
        rewrite_cue(old, new, ops, relocate)

        assert claimed_tracks([DiscFile(new)], ops) == {tmp_path / "Game" / "Game.img"}

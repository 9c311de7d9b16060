"""Tests for ops/fs.py -- mutation gateway, action ledger, dry-run overlay."""

from multidisc.models import ActionKind
from multidisc.ops.fs import FileOps


class TestRealMode:
    def test_move_replaces_existing(self, tmp_path):
        src = tmp_path / "a.iso"
        dst = tmp_path / "b.iso"
        src.write_text("new")
        dst.write_text("old")
        ops = FileOps()
        ops.move(src, dst)
        assert not src.exists()
        assert dst.read_text() == "new"
        assert ops.actions[0].kind == ActionKind.MOVE

    def test_mkdir_creates_ancestors_once(self, tmp_path):
        ops = FileOps()
        ops.mkdir(tmp_path / "a" / "b")
        ops.mkdir(tmp_path / "a" / "b")
        assert (tmp_path / "a" / "b").is_dir()
        assert len(ops.actions) == 1

    def test_write_text_skips_identical_content(self, tmp_path):
        path = tmp_path / "x.m3u"
        path.write_text("a.cue\n")
        ops = FileOps()
        assert ops.write_text(path, "a.cue\n") is False
        assert ops.actions == []
        assert ops.write_text(path, "b.cue\n") is True
        assert path.read_text() == "b.cue\n"
        assert not (tmp_path / "x.m3u.tmp").exists()

    def test_delete_and_rmdir(self, tmp_path):
        d = tmp_path / "d"
        d.mkdir()
        f = d / "f.m3u"
        f.write_text("x\n")
        ops = FileOps()
        ops.delete(f)
        ops.rmdir(d)
        assert not d.exists()
        assert [a.kind for a in ops.actions] == [ActionKind.DELETE, ActionKind.RMDIR]


class TestDryRun:
    def test_move_is_recorded_not_performed(self, tmp_path):
        src = tmp_path / "a.iso"
        src.write_text("data")
        dst = tmp_path / "sub" / "a.iso"
        ops = FileOps(dry_run=True)
        ops.mkdir(dst.parent)
        ops.move(src, dst)
        assert src.exists()
        assert not dst.parent.exists()
        assert [a.kind for a in ops.actions] == [ActionKind.MKDIR, ActionKind.MOVE]

    def test_overlay_reflects_planned_tree(self, tmp_path):
        src = tmp_path / "a.cue"
        src.write_text("FILE \"a.bin\" BINARY\n")
        sub = tmp_path / "sub"
        ops = FileOps(dry_run=True)
        ops.mkdir(sub)
        ops.move(src, sub / "a.cue")
        assert not ops.exists(src)
        assert ops.exists(sub / "a.cue")
        assert ops.is_dir(sub)
        assert ops.list_dir(sub) == [sub / "a.cue"]
        assert ops.list_dir(tmp_path) == [sub]
        assert ops.read_text(sub / "a.cue").startswith("FILE")

    def test_delete_hides_file(self, tmp_path):
        f = tmp_path / "x.m3u"
        f.write_text("x\n")
        ops = FileOps(dry_run=True)
        ops.delete(f)
        assert f.exists()
        assert not ops.exists(f)
        assert ops.list_dir(tmp_path) == []

    def test_write_is_not_performed(self, tmp_path):
        path = tmp_path / "x.m3u"
        ops = FileOps(dry_run=True)
        assert ops.write_text(path, "a\n") is True
        assert not path.exists()
        assert ops.actions[0].kind == ActionKind.WRITE

"""
Tests for probe primitives — filesystem helpers and capture fallbacks.
"""

from pathlib import Path

from jcli.core.services import probes


class TestHome:
    def test_home_dir_honours_env(self, fake_home: Path):
        assert probes.home_dir() == fake_home

    def test_expand_home(self, fake_home: Path):
        assert probes.expand_home("~/Library") == str(fake_home / "Library")

    def test_expand_home_leaves_absolute_paths(self):
        assert probes.expand_home("/opt/homebrew") == "/opt/homebrew"

    def test_path_exists(self, fake_home: Path):
        (fake_home / ".zshrc").write_text("")
        assert probes.path_exists("~/.zshrc")
        assert not probes.path_exists("~/.missing")


class TestDirectorySize:
    def test_missing_path_is_zero(self, tmp_path: Path):
        assert probes.directory_size(tmp_path / "nope") == 0

    def test_sums_nested_files(self, tmp_path: Path):
        (tmp_path / "a").write_bytes(b"x" * 100)
        nested = tmp_path / "sub" / "deeper"
        nested.mkdir(parents=True)
        (nested / "b").write_bytes(b"y" * 50)
        assert probes.directory_size(tmp_path) == 150

    def test_symlinks_not_followed(self, tmp_path: Path):
        target = tmp_path / "big"
        target.write_bytes(b"z" * 500)
        inner = tmp_path / "dir"
        inner.mkdir()
        (inner / "link").symlink_to(target)
        assert probes.directory_size(inner) == 0


class TestCommands:
    def test_command_exists_empty_name(self):
        assert probes.command_exists("") is False

    def test_capture_missing_binary(self):
        result = probes.capture("definitely-not-a-real-binary-jcli")
        assert result["ok"] is False
        assert result["returncode"] == 127
        assert "command not found" in result["error"]

    def test_read_command_output_line_failure(self, monkeypatch):
        monkeypatch.setattr(
            probes, "capture",
            lambda *a, **kw: {"ok": False, "output": "boom", "returncode": 1, "error": "x"},
        )
        assert probes.read_command_output_line("anything") == ""

    def test_version_from_cmd(self, monkeypatch):
        monkeypatch.setattr(
            probes, "capture",
            lambda *a, **kw: {"ok": True, "output": "v20.1.0\n", "returncode": 0, "error": ""},
        )
        probe = probes.version_from_cmd("node", ["--version"], lambda s: s.strip().lstrip("v"))
        assert probe() == "20.1.0"

    def test_version_from_brew_formula(self, monkeypatch):
        seen = []

        def fake_capture(*args, **kwargs):
            seen.append(args)
            return {"ok": True, "output": "nvm 0.39.7\n", "returncode": 0, "error": ""}

        monkeypatch.setattr(probes, "capture", fake_capture)
        assert probes.version_from_brew_formula("nvm")() == "0.39.7"
        assert seen == [("brew", "list", "--versions", "nvm")]

    def test_count_lines(self):
        assert probes.count_lines("a\n\nb\n  \nc\n") == 3

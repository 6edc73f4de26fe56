"""
Tests for version parsers and formatters.
"""

import pytest

from jcli.core.services import version_parsers as vp


class TestStripAnsi:
    def test_color_codes_removed(self):
        assert vp.strip_ansi("\x1b[32mgreen\x1b[0m") == "green"

    def test_plain_text_untouched(self):
        assert vp.strip_ansi("plain 1.2.3") == "plain 1.2.3"


class TestParsers:
    """Known tool outputs → bare version strings."""

    def test_go(self):
        assert vp.parse_go_version("go version go1.21.0 darwin/arm64") == "1.21.0"

    def test_git(self):
        assert vp.parse_git_version("git version 2.39.0 (Apple Git-145)") == "2.39.0"

    def test_python_with_escapes(self):
        assert vp.parse_python_version("\x1b[32mPython 3.12.0\x1b[0m\n") == "3.12.0"

    @pytest.mark.parametrize(
        ("parser", "text", "expected"),
        [
            (vp.parse_brew_version, "Homebrew 4.2.0\nHomebrew/homebrew-core", "4.2.0"),
            (vp.parse_java_version, 'openjdk version "21.0.1" 2023-10-17', "21.0.1"),
            (vp.parse_rust_version, "rustc 1.75.0 (82e1608df 2023-12-21)", "1.75.0"),
            (vp.parse_terraform_version, "Terraform v1.5.7\non darwin_arm64", "1.5.7"),
            (vp.parse_ansible_version, "ansible [core 2.15.0]\n  config file = None", "2.15.0"),
            (vp.parse_claude_version, "2.0.76 (Claude Code)", "2.0.76"),
            (vp.parse_codex_version, "0.1.0", "0.1.0"),
            (vp.parse_codex_version, "codex-cli 0.1.0", "0.1.0"),
            (vp.parse_happy_coder_version, "happy version: 0.13.0\nnode: v20", "0.13.0"),
            (vp.parse_tailscale_version, "1.76.1\n  tailscale commit: abc", "1.76.1"),
            (vp.parse_gh_version, "gh version 2.40.1 (2023-12-13)\nhttps://x", "2.40.1"),
            (vp.parse_mole_version, "banner\nMole version 1.14.5\n", "1.14.5"),
            (vp.parse_pulumi_version, "v3.100.0\n", "3.100.0"),
        ],
    )
    def test_known_outputs(self, parser, text, expected):
        assert parser(text) == expected

    def test_unrecognized_output_is_empty(self):
        assert vp.parse_java_version("nothing useful") == ""
        assert vp.parse_mole_version("") == ""
        assert vp.parse_happy_coder_version("unexpected") == ""


class TestFormatBytes:
    def test_zero(self):
        assert vp.format_bytes(0) == "0 B"

    def test_below_one_kilobyte(self):
        assert vp.format_bytes(1023) == "1023 B"

    def test_one_kilobyte(self):
        assert vp.format_bytes(1024) == "1.0 KB"

    def test_one_gigabyte(self):
        assert vp.format_bytes(1_073_741_824) == "1.0 GB"

    def test_fractional(self):
        assert vp.format_bytes(1536) == "1.5 KB"


class TestFilterStrings:
    def test_order_preserved(self):
        assert vp.filter_strings(["a", "b", "c", "d"], ["c", "a"]) == ["b", "d"]


_PARSERS = [
    getattr(vp, name) for name in sorted(dir(vp))
    if name.startswith("parse_") and callable(getattr(vp, name))
]

_SAMPLES = [
    "",
    "1.2.3",
    "v3.100.0\n",
    "go version go1.21.0 darwin/arm64",
    "git version 2.39.0 (Apple Git-145)",
    'openjdk version "21.0.1" 2023-10-17',
    "Python 3.12.0\n",
    "ansible [core 2.15.0]\n  config file = None",
    "2.0.76 (Claude Code)",
    "happy version: 0.13.0\nnode: v20",
    "gh version 2.40.1 (2023-12-13)\nhttps://x",
    "banner\nMole version 1.14.5\n",
    "tmux 3.4",
]


def _colorize(text: str) -> str:
    """Wrap the whole text and every word in SGR sequences."""
    words = ["\x1b[1;32m" + w + "\x1b[0m" if w.strip() else w for w in text.split(" ")]
    return "\x1b[36m" + " ".join(words) + "\x1b[0m\x1b[K"


class TestEscapeInsensitivity:
    def test_every_parser_is_covered(self):
        assert len(_PARSERS) >= 19

    @pytest.mark.parametrize("parser", _PARSERS, ids=lambda p: p.__name__)
    @pytest.mark.parametrize("text", _SAMPLES)
    def test_colorized_output_parses_the_same(self, parser, text):
        assert parser(_colorize(text)) == parser(text)

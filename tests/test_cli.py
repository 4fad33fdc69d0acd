"""
CLI Tests - Verify the spyglass command.
"""

import os
import sys

import pytest

from spyglass.cli import echo, main


def base_args(test_config):
    return ["--root", str(test_config.root), "--config-dir", str(test_config.config_dir)]
class TestCli:
    """Tests for the command line entry point."""

    def test_status_without_index(self, test_config, capsys):
        """status reports a missing index."""
        assert main(base_args(test_config) + ["status"]) == 0
        assert "no index" in capsys.readouterr().out

    def test_build_then_status(self, test_config, sample_tree, capsys):
        """build writes a snapshot that status can read."""
        assert main(base_args(test_config) + ["build"]) == 0
        assert "Indexed 9 entries" in capsys.readouterr().out

        assert main(base_args(test_config) + ["status"]) == 0
        assert "9 entries" in capsys.readouterr().out

    def test_search_builds_when_missing(self, test_config, sample_tree, capsys):
        """search builds an index first when none is saved."""
        assert main(base_args(test_config) + ["search", "report"]) == 0
        lines = capsys.readouterr().out.splitlines()

        assert lines == [str(sample_tree["report"]), str(sample_tree["report_v2"])]
        assert test_config.index_path.exists()

    def test_search_marks_directories(self, test_config, sample_tree, capsys):
        """Directories are printed with a trailing slash."""
        main(base_args(test_config) + ["build"])
        capsys.readouterr()

        main(base_args(test_config) + ["search", "drafts", "--limit", "1"])
        assert capsys.readouterr().out.strip() == str(sample_tree["drafts"]) + "/"

    def test_show_hidden(self, test_config, sample_tree, capsys):
        """--show-hidden indexes dotfiles."""
        main(base_args(test_config) + ["--show-hidden", "search", "bashrc"])
        assert capsys.readouterr().out.strip() == str(sample_tree["bashrc"])

    @pytest.mark.skipif(sys.platform == "darwin", reason="APFS rejects non-UTF-8 names")
    def test_search_prints_undecodable_name(self, test_config, sample_tree, capsysbinary):
        """A filename that is not valid UTF-8 is printed as its raw bytes."""
        raw_name = b"caf\xe9-notes.txt"
        with open(os.path.join(os.fsencode(str(test_config.root)), raw_name), "wb"):
            pass

        assert main(base_args(test_config) + ["search", "notes"]) == 0
        out = capsysbinary.readouterr().out

        assert os.fsencode(str(test_config.root)) + b"/" + raw_name + b"\n" in out

    @pytest.mark.skipif(sys.platform == "win32", reason="Windows filenames are not bytes")
    def test_echo_round_trips_surrogate_escapes(self, capsysbinary):
        """echo() writes the bytes a surrogate-escaped name was decoded from."""
        echo("/home/me/" + os.fsdecode(b"caf\xe9"))
        assert capsysbinary.readouterr().out == b"/home/me/caf\xe9\n"

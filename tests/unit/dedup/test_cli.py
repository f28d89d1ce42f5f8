"""
Unit tests for the dupsweep CLI.

Tests:
- Exit codes (0 / 1 / 2 / 130)
- Mode flags and their mutual exclusion
- Interactive prompt
- Report and audit log files
- Settings file merged under CLI flags
"""

import signal
from unittest.mock import patch

import pytest

from dupsweep.cli import build_parser, main, prompt_confirm, select_mode
from dupsweep.models import ExecutionMode
from dupsweep.scanner import DedupScanner
from tests.helpers.file_factory import make_record, snapshot_tree, write_file


class TestExitCodes:
    """Test process exit codes."""

    def test_delete_scenario(self, scenario_tree, capsys):
        code = main([str(scenario_tree), "--delete", "--keep", "first"])

        out = capsys.readouterr().out
        assert code == 0
        assert (scenario_tree / "b.txt").exists()
        assert not (scenario_tree / "b2.txt").exists()
        assert not (scenario_tree / "b3.txt").exists()
        assert "Files deleted:        2" in out

    def test_zero_duplicates_is_success(self, scenario_tree, capsys):
        code = main([str(scenario_tree), "--min-size", "10M"])

        out = capsys.readouterr().out
        assert code == 0
        assert "No duplicate files found." in out
        assert "Duplicate sets found: 0" in out

    def test_missing_root(self, tmp_path, capsys):
        code = main([str(tmp_path / "missing")])

        assert code == 2
        assert "Directory not found" in capsys.readouterr().err

    def test_bad_policy(self, scenario_tree, capsys):
        code = main([str(scenario_tree), "--keep", "biggest"])

        assert code == 2
        assert "Invalid keep policy" in capsys.readouterr().err

    def test_bad_size(self, scenario_tree, capsys):
        code = main([str(scenario_tree), "--min-size", "ten"])

        assert code == 2
        assert "Invalid size" in capsys.readouterr().err

    def test_bad_algorithm(self, scenario_tree):
        assert main([str(scenario_tree), "--algorithm", "crc32"]) == 2

    def test_delete_and_interactive_exclusive(self, scenario_tree):
        with pytest.raises(SystemExit) as exc_info:
            main([str(scenario_tree), "--delete", "--interactive"])

        assert exc_info.value.code == 2

    def test_deletion_failure_still_success(self, scenario_tree, capsys):
        original_scan = DedupScanner.scan

        async def scan_then_vanish(self):
            sets = await original_scan(self)
            (scenario_tree / "b2.txt").unlink()
            return sets

        with patch.object(DedupScanner, "scan", scan_then_vanish):
            code = main([str(scenario_tree), "--delete"])

        captured = capsys.readouterr()
        assert code == 0
        assert "Failed deletions:     1" in captured.out
        assert "dedup_delete_failed" in captured.err

    def test_unexpected_error(self, scenario_tree, capsys):
        with patch("dupsweep.cli.run_dedup", side_effect=RuntimeError("disk on fire")):
            code = main([str(scenario_tree)])

        assert code == 1
        assert "disk on fire" in capsys.readouterr().err

    def test_interrupted(self, scenario_tree):
        with patch("dupsweep.cli.run_dedup", side_effect=KeyboardInterrupt):
            assert main([str(scenario_tree)]) == 130

    def test_ctrl_c_at_prompt(self, scenario_tree, monkeypatch, capsys):
        prompts = []

        def interrupted_input(prompt):
            prompts.append(prompt)
            signal.raise_signal(signal.SIGINT)
            return "y"

        monkeypatch.setattr("builtins.input", interrupted_input)

        code = main([str(scenario_tree), "--interactive"])

        assert code == 130
        assert len(prompts) == 1
        assert len(snapshot_tree(scenario_tree)) == 4
        assert "Operation cancelled by user" in capsys.readouterr().err

    def test_report_write_failure(self, scenario_tree, tmp_path):
        """Report path is a directory -> general error."""
        assert main([str(scenario_tree), "--output", str(tmp_path)]) == 1


class TestModes:
    """Test mode selection."""

    def test_default_is_dry_run(self, scenario_tree, capsys):
        before = snapshot_tree(scenario_tree)

        code = main([str(scenario_tree)])

        out = capsys.readouterr().out
        assert code == 0
        assert snapshot_tree(scenario_tree) == before
        assert "WOULD DELETE" in out
        assert "Files that would be deleted: 2" in out

    @pytest.mark.parametrize(
        "argv,expected",
        [
            (["."], ExecutionMode.dry_run),
            ([".", "--dry-run"], ExecutionMode.dry_run),
            ([".", "-d"], ExecutionMode.automatic),
            ([".", "-i"], ExecutionMode.interactive),
        ],
    )
    def test_select_mode(self, argv, expected):
        assert select_mode(build_parser().parse_args(argv)) == expected

    def test_interactive_declined(self, scenario_tree, monkeypatch, capsys):
        replies = iter(["n", ""])
        monkeypatch.setattr("builtins.input", lambda prompt: next(replies))

        code = main([str(scenario_tree), "--interactive"])

        out = capsys.readouterr().out
        assert code == 0
        assert len(snapshot_tree(scenario_tree)) == 4
        assert "Duplicate files:      2" in out
        assert "Files deleted:        0" in out
        assert "Files declined:       2" in out

    def test_interactive_confirmed(self, scenario_tree, monkeypatch, capsys):
        replies = iter(["y", "no"])
        monkeypatch.setattr("builtins.input", lambda prompt: next(replies))

        main([str(scenario_tree), "-i"])

        assert not (scenario_tree / "b2.txt").exists()
        assert (scenario_tree / "b3.txt").exists()


class TestPromptConfirm:
    """Test the stdin prompt."""

    @pytest.mark.parametrize("reply,expected", [("y", True), ("YES", True), (" y ", True), ("n", False), ("", False), ("maybe", False)])
    def test_replies(self, monkeypatch, reply, expected):
        monkeypatch.setattr("builtins.input", lambda prompt: reply)

        assert prompt_confirm(make_record("/d/f.txt")) is expected

    def test_eof_declines(self, monkeypatch, capsys):
        def raise_eof(prompt):
            raise EOFError

        monkeypatch.setattr("builtins.input", raise_eof)

        assert prompt_confirm(make_record("/d/f.txt")) is False


class TestFiles:
    """Report, audit log and settings file."""

    def test_output_and_log(self, scenario_tree, tmp_path, capsys):
        report = tmp_path / "out" / "report.txt"
        log = tmp_path / "audit.log"

        code = main([str(scenario_tree), "-d", "-o", str(report), "-l", str(log)])

        assert code == 0
        report_text = report.read_text(encoding="utf-8")
        assert "KEEP" in report_text and "DELETED" in report_text
        log_lines = log.read_text(encoding="utf-8").splitlines()
        assert len(log_lines) == 2
        assert all("Deleted:" in line for line in log_lines)

    def test_settings_file(self, tmp_path, capsys):
        root = tmp_path / "root"
        write_file(root / "a.txt", b"same", mtime=1_600_000_000)
        write_file(root / "sub" / "b.txt", b"same", mtime=1_700_000_000)
        config = tmp_path / "dupsweep.yaml"
        config.write_text("dupsweep:\n  recursive: true\n  keep: newest\n", encoding="utf-8")

        code = main([str(root), "-d", "-c", str(config)])

        assert code == 0
        assert not (root / "a.txt").exists()
        assert (root / "sub" / "b.txt").exists()

    def test_cli_overrides_settings(self, tmp_path, capsys):
        root = tmp_path / "root"
        write_file(root / "a.txt", b"same", mtime=1_600_000_000)
        write_file(root / "b.txt", b"same", mtime=1_700_000_000)
        config = tmp_path / "dupsweep.yaml"
        config.write_text("dupsweep:\n  keep: newest\n", encoding="utf-8")

        main([str(root), "-d", "-c", str(config), "--keep", "oldest"])

        assert (root / "a.txt").exists()
        assert not (root / "b.txt").exists()

    def test_invalid_settings_file(self, scenario_tree, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("nothing: here\n", encoding="utf-8")

        assert main([str(scenario_tree), "-c", str(config)]) == 2

    def test_quiet_prints_summary_only(self, scenario_tree, capsys):
        main([str(scenario_tree), "-q"])

        out = capsys.readouterr().out
        assert "Set 1" not in out
        assert "Summary:" in out

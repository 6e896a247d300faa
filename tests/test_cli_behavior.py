from __future__ import annotations

import argparse
import io
import json
import tempfile
import tests._path_setup  # noqa: F401
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from edit_attribution import cli
from edit_attribution.config import Scope


class _StubProvider:
    def __init__(self) -> None:
        self.emitted: list[tuple[str, object]] = []
        self.shutdown_called = False

    def emit_attribution(self, file_id, diff_result, report) -> None:
        self.emitted.append((file_id, report))

    def flush(self) -> None:
        pass

    def shutdown(self) -> None:
        self.shutdown_called = True


def _pipeline_args(**overrides: object) -> argparse.Namespace:
    values: dict[str, object] = {"insertions": None, "provider": None, "json": False}
    values.update(overrides)
    return argparse.Namespace(**values)


class CliDiffTest(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name)
        self._cfg = patch("edit_attribution.cli.cfg.load_config", return_value={"provider": "console"})
        self._cfg.start()

    def tearDown(self) -> None:
        self._cfg.stop()
        self._td.cleanup()

    def _write(self, name: str, text: str) -> Path:
        path = self.root / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_cmd_diff_replays_insertions_and_emits(self) -> None:
        old = self._write("old.py", "import os\n")
        new = self._write("new.py", "import os\nprint(os.getcwd())\nx = 1\n")
        events = self._write(
            "events.jsonl",
            json.dumps({"event": "change", "file": "anything.py", "text": "print(os.getcwd())", "line": 2}) + "\n",
        )
        provider = _StubProvider()
        with patch("edit_attribution.cli.create_provider", return_value=provider):
            rc = cli.cmd_diff(_pipeline_args(old=old, new=new, insertions=events))

        self.assertEqual(rc, 0)
        self.assertTrue(provider.shutdown_called)
        file_id, report = provider.emitted[0]
        self.assertEqual(file_id, str(new))
        self.assertEqual(report.tool_attributed_count, 1)
        self.assertEqual(report.manual_count, 1)

    def test_cmd_diff_json_output(self) -> None:
        old = self._write("old.txt", "a\nb\nc")
        new = self._write("new.txt", "a\nB\nc\nd")
        buf = io.StringIO()
        with redirect_stdout(buf), patch("edit_attribution.cli.create_provider") as mock_create:
            rc = cli.cmd_diff(_pipeline_args(old=old, new=new, json=True))

        self.assertEqual(rc, 0)
        mock_create.assert_not_called()
        data = json.loads(buf.getvalue())
        self.assertEqual(data["diff"]["modified"], [{"line_number": 2, "old_content": "b", "new_content": "B"}])
        self.assertEqual(data["diff"]["added"], [{"line_number": 4, "content": "d"}])
        self.assertEqual(data["attribution"]["manual_count"], 2)

    def test_cmd_diff_missing_file_returns_1(self) -> None:
        rc = cli.cmd_diff(_pipeline_args(old=self.root / "nope.py", new=self.root / "nope2.py"))
        self.assertEqual(rc, 1)

    def test_cmd_diff_unconfigured_provider_returns_1(self) -> None:
        old = self._write("old.py", "a")
        new = self._write("new.py", "b")
        with patch("edit_attribution.cli.create_provider", return_value=None):
            rc = cli.cmd_diff(_pipeline_args(old=old, new=new, provider="otlp"))
        self.assertEqual(rc, 1)

    def test_cmd_check_without_baseline_returns_1(self) -> None:
        path = self._write("mod.py", "x = 1\n")
        provider = _StubProvider()
        with patch("edit_attribution.cli.create_provider", return_value=provider), patch(
            "edit_attribution.cli.GitBaseline.get_baseline_content", return_value=None
        ):
            rc = cli.cmd_check(_pipeline_args(file=path, revision="HEAD"))
        self.assertEqual(rc, 1)
        self.assertEqual(provider.emitted, [])

    def test_cmd_check_uses_git_baseline(self) -> None:
        path = self._write("mod.py", "x = 1\ny = 2\n")
        provider = _StubProvider()
        with patch("edit_attribution.cli.create_provider", return_value=provider), patch(
            "edit_attribution.cli.GitBaseline.get_baseline_content", return_value="x = 1\n"
        ):
            rc = cli.cmd_check(_pipeline_args(file=path, revision="HEAD"))
        self.assertEqual(rc, 0)
        _, report = provider.emitted[0]
        self.assertEqual(report.manual_count, 1)


class CliConfigTest(unittest.TestCase):
    def test_config_init_non_interactive_writes_project_config(self) -> None:
        saved: dict[str, object] = {}

        def _save_config(data: dict[str, object], scope: Scope) -> None:
            saved["data"] = data
            saved["scope"] = scope

        args = argparse.Namespace(project=True, global_=False, provider="console", file_types="py,.pyi", endpoint=None)
        with patch("edit_attribution.cli.cfg.load_raw_config", return_value={"debug": True}), patch(
            "edit_attribution.cli.cfg.save_config", side_effect=_save_config
        ):
            rc = cli.cmd_config_init(args)

        self.assertEqual(rc, 0)
        self.assertEqual(saved["scope"], Scope.PROJECT)
        self.assertEqual(saved["data"], {"debug": True, "provider": "console", "file_types": [".py", ".pyi"]})

    def test_config_init_otlp_uses_endpoint_flag(self) -> None:
        saved: dict[str, object] = {}
        args = argparse.Namespace(
            project=False, global_=True, provider="otlp", file_types=".py", endpoint="http://collector"
        )
        with patch("edit_attribution.cli.cfg.load_raw_config", return_value={}), patch(
            "edit_attribution.cli.cfg.load_config", return_value={}
        ), patch(
            "edit_attribution.cli.cfg.save_config", side_effect=lambda d, s: saved.update(data=d, scope=s)
        ):
            rc = cli.cmd_config_init(args)

        self.assertEqual(rc, 0)
        self.assertEqual(saved["scope"], Scope.GLOBAL)
        self.assertEqual(saved["data"]["otlp"], {"endpoint": "http://collector"})

    def test_config_init_without_tty_names_missing_flag(self) -> None:
        args = argparse.Namespace(project=False, global_=False, provider=None, file_types=None, endpoint=None)
        with patch("edit_attribution.cli.cfg.load_raw_config", return_value={}), patch(
            "edit_attribution.cli._is_tty", return_value=False
        ):
            with self.assertRaises(SystemExit) as ctx:
                cli.cmd_config_init(args)
        self.assertIn("--provider", str(ctx.exception.code))

    def test_config_init_empty_file_types_returns_1(self) -> None:
        args = argparse.Namespace(project=True, global_=False, provider="console", file_types=" , ", endpoint=None)
        with patch("edit_attribution.cli.cfg.load_raw_config", return_value={}), patch(
            "edit_attribution.cli.cfg.save_config"
        ) as mock_save:
            rc = cli.cmd_config_init(args)
        self.assertEqual(rc, 1)
        mock_save.assert_not_called()

    def test_masked_config_hides_otlp_headers(self) -> None:
        masked = cli._masked_config({"otlp": {"headers": "Authorization=Bearer abcdefghijkl"}})
        self.assertEqual(masked["otlp"]["headers"], "Auth...ijkl")


class CliParserTest(unittest.TestCase):
    def test_parser_accepts_pipeline_flags(self) -> None:
        args = cli.build_parser().parse_args(["diff", "a.py", "b.py", "--json", "--insertions", "e.jsonl"])
        self.assertEqual(args.command, "diff")
        self.assertTrue(args.json)
        self.assertEqual(args.insertions, Path("e.jsonl"))

    def test_hook_accepts_provider_flag(self) -> None:
        args = cli.build_parser().parse_args(["hook", "--provider", "otlp"])
        self.assertEqual(args.provider, "otlp")


if __name__ == "__main__":
    unittest.main()

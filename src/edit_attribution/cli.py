"""CLI for edit-attribution."""

import argparse
import json
import sys
from importlib.metadata import version
from pathlib import Path
from typing import Any

import questionary
from rich.console import Console

from . import config as cfg
from .adapters.baseline import BaselineSource, GitBaseline, StaticBaseline
from .adapters.event_payload import ChangeEvent, iter_events
from .file_io import read_text
from .hook import build_tracker, replay_events
from .providers.factory import PROVIDERS, create_provider
from .runtime.tracker import EventClock
from .session import AttributionSession, SaveOutcome

console = Console(stderr=True)


class _NoTTYError(SystemExit):
    def __init__(self, flag: str) -> None:
        super().__init__(f"No TTY detected. Use {flag} to run non-interactively.")


def _is_tty() -> bool:
    return sys.stdin.isatty()


def _require_tty(flag: str) -> None:
    if not _is_tty():
        raise _NoTTYError(flag)


def _select(message: str, choices: list[str], flag: str) -> str:
    _require_tty(flag)
    selected = questionary.select(message, choices=choices).ask()
    if selected is None:
        raise SystemExit(1)
    return selected


def _text(message: str, *, default: str = "", flag: str = "") -> str:
    if flag:
        _require_tty(flag)
    result = questionary.text(message, default=default).ask()
    return result or default


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "***"
    return value[:4] + "..." + value[-4:]


def _read_input(path: Path) -> str | None:
    try:
        return read_text(path)
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        return None


def _load_insertions(path: Path | None) -> list[ChangeEvent] | None:
    if path is None:
        return []
    text = _read_input(path)
    if text is None:
        return None
    return [e for e in iter_events(text.splitlines()) if isinstance(e, ChangeEvent)]


def _run_pipeline(
    args: argparse.Namespace,
    file_id: str,
    content: str,
    baseline: BaselineSource,
) -> int:
    insertions = _load_insertions(getattr(args, "insertions", None))
    if insertions is None:
        return 1

    merged = cfg.load_config()
    as_json = getattr(args, "json", False)
    provider = None
    if not as_json:
        provider_name = getattr(args, "provider", None) or merged.get("provider") or "console"
        provider = create_provider(provider_name, merged)
        if provider is None:
            console.print(f"[red]Provider '{provider_name}' is not configured.[/red]")
            return 1

    clock = EventClock()
    session = AttributionSession(build_tracker(merged, clock), baseline, provider, file_types=None)
    try:
        # Replayed insertions count as belonging to the file under inspection.
        replay_events(
            session,
            (
                ChangeEvent(file_id, e.text, e.line_number, e.replaced_length, e.timestamp_ms)
                for e in insertions
            ),
            clock,
        )
        outcome = session.on_file_saved(file_id, content)
        if provider is not None:
            provider.flush()
    finally:
        if provider is not None:
            provider.shutdown()

    if outcome is None:
        console.print(f"[yellow]No baseline available for {file_id}.[/yellow]")
        return 1
    if as_json:
        print(json.dumps(_outcome_to_dict(outcome), indent=2, ensure_ascii=False))
    return 0


def _outcome_to_dict(outcome: SaveOutcome) -> dict[str, Any]:
    return {
        "file": outcome.file_id,
        "diff": outcome.diff.to_dict(),
        "attribution": outcome.report.to_dict(),
    }


def cmd_diff(args: argparse.Namespace) -> int:
    old_text = _read_input(args.old)
    new_text = _read_input(args.new)
    if old_text is None or new_text is None:
        return 1
    file_id = str(args.new)
    return _run_pipeline(args, file_id, new_text, StaticBaseline({file_id: old_text}))


def cmd_check(args: argparse.Namespace) -> int:
    content = _read_input(args.file)
    if content is None:
        return 1
    return _run_pipeline(args, str(args.file), content, GitBaseline(revision=args.revision))


def cmd_hook(_args: argparse.Namespace) -> int:
    from .hook import main as hook_main
    return hook_main()


def _masked_config(data: dict[str, Any]) -> dict[str, Any]:
    out = json.loads(json.dumps(data, default=str))
    otlp = out.get("otlp")
    if isinstance(otlp, dict) and otlp.get("headers"):
        otlp["headers"] = _mask(str(otlp["headers"]))
    return out


def cmd_config_show(_args: argparse.Namespace) -> int:
    console.print_json(data=_masked_config(cfg.load_config()))
    return 0


def _resolve_scope(args: argparse.Namespace) -> cfg.Scope:
    if getattr(args, "project", False):
        return cfg.Scope.PROJECT
    return cfg.Scope.GLOBAL


def cmd_config_init(args: argparse.Namespace) -> int:
    scope = _resolve_scope(args)
    data = cfg.load_raw_config(scope)

    provider = getattr(args, "provider", None) or _select("Which provider?", PROVIDERS, "--provider")
    data["provider"] = provider

    raw_types = getattr(args, "file_types", None)
    if raw_types is None:
        raw_types = _text("File types to track (comma separated):", default=".py", flag="--file-types")
    file_types = cfg.normalize_file_types(raw_types)
    if not file_types:
        console.print("[red]At least one file type is required.[/red]")
        return 1
    data["file_types"] = file_types

    if provider == "otlp":
        section = data.setdefault("otlp", {})
        merged_section = cfg.get_provider_config(cfg.load_config(), "otlp")
        endpoint = getattr(args, "endpoint", None) or section.get("endpoint") or merged_section.get("endpoint")
        if not endpoint:
            endpoint = _text("OTEL_EXPORTER_OTLP_ENDPOINT:", flag="--endpoint")
        if not endpoint:
            console.print("[red]otlp provider requires an endpoint.[/red]")
            return 1
        section["endpoint"] = endpoint

    cfg.save_config(data, scope)
    console.print(f"[green]Saved.[/green] Config: {cfg.config_path(scope)}")
    return 0


def _add_pipeline_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--insertions", type=Path, metavar="EVENTS.jsonl",
                        help="Replay change events from a JSONL file before attributing")
    parser.add_argument("--provider", choices=PROVIDERS, help="Output provider")
    parser.add_argument("--json", action="store_true",
                        help="Print the diff and attribution as JSON on stdout")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edit-attribution",
        description="Attribute saved line changes to completion-tool insertions or manual edits",
    )
    sub = parser.add_subparsers(dest="command")

    p_diff = sub.add_parser("diff", help="Diff two files and attribute the changes")
    p_diff.add_argument("old", type=Path, help="Baseline revision")
    p_diff.add_argument("new", type=Path, help="Current revision")
    _add_pipeline_flags(p_diff)

    p_check = sub.add_parser("check", help="Diff a file against its last committed version")
    p_check.add_argument("file", type=Path)
    p_check.add_argument("--revision", default="HEAD", help="Git revision to diff against")
    _add_pipeline_flags(p_check)

    p_hook = sub.add_parser("hook", help="Process JSONL change/save events from stdin")
    p_hook.add_argument("--provider", choices=PROVIDERS, help="Output provider")

    p_config = sub.add_parser("config", help="Show or write configuration")
    config_sub = p_config.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Show merged configuration")
    p_init = config_sub.add_parser("init", help="Write a config file")
    group = p_init.add_mutually_exclusive_group()
    group.add_argument("--global", dest="global_", action="store_true", help="Use global scope")
    group.add_argument("--project", action="store_true", help="Use project scope")
    p_init.add_argument("--provider", choices=PROVIDERS, help="Provider to use")
    p_init.add_argument("--file-types", dest="file_types", help="Comma separated suffixes, e.g. .py,.pyi")
    p_init.add_argument("--endpoint", help="OTLP endpoint (otlp provider)")

    sub.add_parser("version", help="Show version")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.command == "config":
        config_commands = {"show": cmd_config_show, "init": cmd_config_init}
        handler = config_commands.get(args.config_command or "show")
        sys.exit(handler(args))

    if args.command in ("diff", "check"):
        from .logging_setup import configure

        configure(None, debug=bool(cfg.load_config().get("debug", False)))

    commands = {
        "diff": cmd_diff,
        "check": cmd_check,
        "hook": cmd_hook,
        "version": lambda _: console.print(version("edit-attribution")) or 0,
    }
    sys.exit(commands[args.command](args))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
uigen - replay agent tool calls against a virtual project tree
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from uigen.config.settings import Settings
from uigen.constants import DEFAULT_EXPORT_BRANCH
from uigen.git_backend.repository import ProjectRepository
from uigen.preview.bridge import DirectoryPreviewSink, HttpPreviewSink, PreviewBridge
from uigen.session.registry import SessionRegistry
from uigen.tools.invocation import Invocation

REPLAY_SESSION_ID = "replay"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="uigen",
        description="uigen - tool invocation engine for AI-edited projects",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: ~/.config/uigen/settings.json)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser(
        "replay",
        help="Replay a transcript of turns (JSON list of lists of {toolName, args})",
    )
    replay.add_argument("transcript", type=Path, help="Transcript JSON file")
    replay.add_argument("--seed-repo", type=Path, help="Git repository to seed the project from")
    replay.add_argument("--seed-branch", default=DEFAULT_EXPORT_BRANCH, help="Branch to seed from")
    replay.add_argument("--export-repo", type=Path, help="Git repository to export the result to")
    replay.add_argument("--branch", default=DEFAULT_EXPORT_BRANCH, help="Branch to export to")
    replay.add_argument("--preview-dir", type=Path, help="Mirror each turn's snapshot here")
    replay.add_argument("--preview-url", help="POST each turn's snapshot to this bundler URL")
    replay.add_argument("--results", type=Path, help="Write every tool result (JSON) here")

    config = subparsers.add_parser("config", help="Show or change a setting")
    config.add_argument("key", help="Dot-separated setting path, e.g. vfs.history_limit")
    config.add_argument("value", nargs="?", help="New value (parsed as JSON when possible)")

    return parser.parse_args(argv)


def load_transcript(path: Path) -> list[list[dict[str, Any]]]:
    """Load turns from a transcript file.

    A flat list of tool calls is treated as a single turn.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("Transcript must be a JSON list")
    if data and all(isinstance(item, dict) for item in data):
        return [data]
    return [list(turn) for turn in data]


def build_preview(args: argparse.Namespace, settings: Settings) -> PreviewBridge:
    bridge = PreviewBridge()

    preview_dir = args.preview_dir or settings.get("preview.directory") or None
    if preview_dir:
        bridge.add_sink(DirectoryPreviewSink(preview_dir))

    preview_url = args.preview_url or settings.get_preview_url()
    if preview_url:
        bridge.add_sink(
            HttpPreviewSink(
                preview_url,
                timeout=settings.get_preview_timeout(),
                max_retries=settings.get_preview_max_retries(),
            )
        )

    return bridge


def _print_invocation(invocation: Invocation) -> None:
    if not invocation.is_terminal:
        return
    if invocation.succeeded:
        print(f"   ✓ #{invocation.id} {invocation.summary}")
    else:
        outcome = invocation.outcome or {}
        print(
            f"   ❌ #{invocation.id} {invocation.summary}: "
            f"[{outcome.get('error')}] {outcome.get('message')}"
        )


def replay(args: argparse.Namespace, settings: Settings) -> int:
    turns = load_transcript(args.transcript)

    seed = None
    if args.seed_repo:
        seed = ProjectRepository(args.seed_repo, create=False).load_snapshot(args.seed_branch)
        print(f"🌱 Seeded {len(seed)} files from {args.seed_repo} ({args.seed_branch})")

    registry = SessionRegistry(settings, build_preview(args, settings))
    runner = registry.open(REPLAY_SESSION_ID, seed=seed)
    runner.invocation_updated.connect(_print_invocation)

    failures = 0
    for number, turn in enumerate(turns, start=1):
        print(f"🔄 Turn {number}: {len(turn)} tool call(s)")
        result = runner.run_turn(turn)
        failures += len(result.failed)
        print(f"   {len(result.changed_files)} file(s) changed")

    if args.results:
        results = [inv.to_tool_result() for inv in runner.tool_manager.invocations]
        args.results.write_text(json.dumps(results, indent=2), encoding="utf-8")
        print(f"📝 Wrote {len(results)} tool result(s) to {args.results}")

    export_to = ProjectRepository(args.export_repo) if args.export_repo else None
    registry.close(REPLAY_SESSION_ID, export_to=export_to, branch_name=args.branch)

    return 1 if failures else 0


def configure(args: argparse.Namespace, settings: Settings) -> int:
    """Print a setting, or set it and save the settings file."""
    if args.value is None:
        print(json.dumps(settings.get(args.key)))
        return 0

    try:
        value = json.loads(args.value)
    except json.JSONDecodeError:
        value = args.value  # Bare strings need no quoting

    settings.set(args.key, value)
    settings.save()
    print(f"✓ {args.key} = {json.dumps(value)} ({settings.config_path})")
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = Settings(args.config)

    if args.command == "replay":
        sys.exit(replay(args, settings))
    elif args.command == "config":
        sys.exit(configure(args, settings))


if __name__ == "__main__":
    main()

"""
Preview bridge - hands completed-turn snapshots to the preview renderer.

The bridge only ever sees full {path: content} snapshots taken after every
command of a turn reached a terminal state, so a preview is never mid-edit.
Rendering is someone else's job: sinks forward the snapshot to a bundler
endpoint or mirror it into a directory a dev server watches.
"""

import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import requests

from uigen.constants import ENTRYPOINT


class PreviewSink(Protocol):
    """Something that accepts snapshots for rendering."""

    def publish(self, session_id: str, snapshot: Mapping[str, str]) -> None: ...


class HttpPreviewSink:
    """POSTs snapshots as JSON to a bundler endpoint"""

    def __init__(self, url: str, timeout: float = 10, max_retries: int = 3) -> None:
        self.url = url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)  # At least one attempt

    def build_payload(self, session_id: str, snapshot: Mapping[str, str]) -> dict[str, Any]:
        return {
            "sessionId": session_id,
            "entrypoint": ENTRYPOINT,
            "files": dict(snapshot),
        }

    def publish(self, session_id: str, snapshot: Mapping[str, str]) -> None:
        """Send a snapshot, backing off on rate limiting"""
        payload = self.build_payload(session_id, snapshot)

        response: requests.Response | None = None
        for attempt in range(self.max_retries):
            response = requests.post(self.url, json=payload, timeout=self.timeout)

            if response.status_code == 429:
                # Rate limited - back off and retry
                wait_time = 2**attempt  # Exponential backoff: 1, 2, 4... seconds
                print(
                    f"⏳ Preview rate limited (429), waiting {wait_time}s before retry "
                    f"{attempt + 1}/{self.max_retries}"
                )
                time.sleep(wait_time)
                continue

            response.raise_for_status()
            return

        # Exhausted all retries
        assert response is not None
        response.raise_for_status()


class DirectoryPreviewSink:
    """Mirrors snapshots into a directory (e.g. one a dev server watches)"""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self._written: set[str] = set()

    def publish(self, session_id: str, snapshot: Mapping[str, str]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

        # Remove files that disappeared since the last snapshot
        for filepath in self._written - set(snapshot):
            stale = self.root / filepath.lstrip("/")
            stale.unlink(missing_ok=True)

        for filepath, content in snapshot.items():
            full_path = self.root / filepath.lstrip("/")
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(content, encoding="utf-8")

        self._written = set(snapshot)


class PreviewBridge:
    """
    Keeps the latest snapshot per session and forwards it to the sinks.

    A failing sink is reported and skipped: the preview is decoupled from the
    engine, so it never fails a turn.
    """

    def __init__(self, sinks: list[PreviewSink] | None = None) -> None:
        self.sinks: list[PreviewSink] = list(sinks or [])
        self._latest: dict[str, dict[str, str]] = {}

    def add_sink(self, sink: PreviewSink) -> None:
        self.sinks.append(sink)

    def publish(self, session_id: str, snapshot: Mapping[str, str]) -> list[Exception]:
        """
        Record a snapshot and hand it to every sink.

        Returns:
            Errors raised by sinks (empty if all succeeded)
        """
        snapshot = dict(snapshot)
        self._latest[session_id] = snapshot

        if ENTRYPOINT not in snapshot:
            print(f"⚠️  Session {session_id}: no {ENTRYPOINT} yet, preview may not render")

        errors: list[Exception] = []
        for sink in self.sinks:
            try:
                sink.publish(session_id, snapshot)
            except (requests.RequestException, OSError) as err:
                print(f"❌ Preview sink {type(sink).__name__} failed: {err}")
                errors.append(err)
        return errors

    def latest(self, session_id: str) -> dict[str, str] | None:
        """Most recent snapshot published for a session"""
        snapshot = self._latest.get(session_id)
        return dict(snapshot) if snapshot is not None else None

    def forget(self, session_id: str) -> None:
        """Drop a session's snapshot (session ended)"""
        self._latest.pop(session_id, None)

"""Provider for Codex (OpenAI) conversation transcripts.

Codex stores conversations as JSONL files at:
    ~/.codex/sessions/<year>/<month>/<day>/rollout-<timestamp>-<uuid>.jsonl

Each line is a JSON object with a type field:
- session_meta: Session metadata (id, cwd, timestamp)
- response_item: Contains messages with role and content
- event_msg: Event notifications
- turn_context: Turn-level context information

Only response_item entries whose payload.type is "message" are conversation
turns; everything else is skipped.
"""

import re
from pathlib import Path

from session_lens.models import FileLocator, SessionMessage, SessionMeta
from session_lens.providers.base import Provider
from session_lens.providers.utils import (
    collect_files,
    extract_text,
    file_timestamps,
    iter_jsonl,
    parse_timestamp_ms,
)

UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def extract_session_id(filename: str) -> str | None:
    """Return the first UUID embedded in a rollout filename.

    e.g. "rollout-2026-01-22T10-52-33-019be668-4c23-7792-8b9c-7995e5bfdeee.jsonl"
    -> "019be668-4c23-7792-8b9c-7995e5bfdeee"
    """
    match = UUID_RE.search(filename)
    return match.group(0) if match else None


class CodexProvider(Provider):
    """Provider for Codex JSONL rollout files."""

    provider_id = "codex"

    def scan(self) -> list[SessionMeta]:
        sessions: list[SessionMeta] = []

        for path in collect_files(self.root / "sessions", "jsonl"):
            meta = self._session_from_path(path)
            if meta:
                sessions.append(meta)

        return sessions

    def _session_from_path(self, path: Path) -> SessionMeta | None:
        session_id = extract_session_id(path.name)
        if session_id is None:
            return None

        created_at, last_active_at = file_timestamps(path)

        return SessionMeta(
            provider_id=self.provider_id,
            session_id=session_id,
            created_at=created_at,
            last_active_at=last_active_at,
            source_path=FileLocator(path),
            resume_command=f"codex resume {session_id}",
        )

    def load_messages(self, locator: FileLocator) -> list[SessionMessage]:
        messages: list[SessionMessage] = []

        for entry in iter_jsonl(locator.path):
            if entry.get("type") != "response_item":
                continue

            payload = entry.get("payload")
            if not isinstance(payload, dict) or payload.get("type") != "message":
                continue

            role = payload.get("role")
            if not isinstance(role, str):
                role = "unknown"

            text = extract_text(payload.get("content")).strip()
            if not text:
                continue

            messages.append(
                SessionMessage(
                    role=role,
                    content=text,
                    ts=parse_timestamp_ms(entry.get("timestamp")),
                )
            )

        return messages

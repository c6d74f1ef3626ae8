"""Provider for OpenClaw agent session transcripts.

OpenClaw stores sessions per agent as JSONL files at:
    ~/.openclaw/agents/<agent>/sessions/<session-id>.jsonl

Next to them sits sessions.json, an index the tool maintains for itself.

Each line is a JSON object; conversation turns have type "message" and a
nested message object with role ("user", "assistant", "toolResult") and
content (string or array of blocks).
"""

from pathlib import Path

from session_lens.models import FileLocator, SessionMessage, SessionMeta
from session_lens.providers.base import Provider
from session_lens.providers.utils import extract_text, file_timestamps, iter_jsonl, parse_timestamp_ms

INDEX_FILENAME = "sessions.json"


class OpenClawProvider(Provider):
    """Provider for OpenClaw JSONL session files."""

    provider_id = "openclaw"

    def scan(self) -> list[SessionMeta]:
        agents_dir = self.root / "agents"
        sessions: list[SessionMeta] = []

        try:
            agent_dirs = [p for p in agents_dir.iterdir() if p.is_dir()]
        except OSError:
            return []

        for agent_dir in agent_dirs:
            try:
                session_files = list((agent_dir / "sessions").iterdir())
            except OSError:
                continue

            for path in session_files:
                if path.name == INDEX_FILENAME:
                    continue
                if path.suffix != ".jsonl" or not path.is_file():
                    continue
                meta = self._session_from_path(path)
                if meta:
                    sessions.append(meta)

        return sessions

    def _session_from_path(self, path: Path) -> SessionMeta | None:
        session_id = path.stem
        if not session_id:
            return None

        created_at, last_active_at = file_timestamps(path)

        # OpenClaw has no resume command
        return SessionMeta(
            provider_id=self.provider_id,
            session_id=session_id,
            created_at=created_at,
            last_active_at=last_active_at,
            source_path=FileLocator(path),
        )

    def load_messages(self, locator: FileLocator) -> list[SessionMessage]:
        messages: list[SessionMessage] = []

        for entry in iter_jsonl(locator.path):
            if entry.get("type") != "message":
                continue

            message = entry.get("message")
            if not isinstance(message, dict):
                continue

            role = message.get("role")
            if not isinstance(role, str):
                role = "unknown"
            if role == "toolResult":
                role = "tool"

            text = extract_text(message.get("content")).strip()
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

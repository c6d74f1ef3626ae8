"""Provider for Gemini CLI conversation transcripts.

Gemini CLI stores conversations as JSON files at:
    ~/.gemini/tmp/<project_hash>/chats/session-<id>.json

Each file is one JSON object with:
- sessionId: UUID session identifier
- projectHash: Hash of the project path
- startTime / lastUpdated: ISO 8601 timestamps
- messages: Array of message objects
  - id: Message UUID
  - timestamp: ISO 8601 timestamp
  - type: "user", "gemini", "info", "error", ...
  - content: String content
"""

import json
from pathlib import Path

from session_lens.logging import get_logger
from session_lens.models import FileLocator, SessionMessage, SessionMeta
from session_lens.providers.base import Provider, SessionLoadError
from session_lens.providers.utils import extract_text, file_timestamps, parse_timestamp_ms

logger = get_logger("providers.gemini")

SESSION_FILE_PREFIX = "session-"

ROLE_MAPPING = {
    "gemini": "assistant",
    "user": "user",
}


class GeminiProvider(Provider):
    """Provider for Gemini CLI JSON session files."""

    provider_id = "gemini"

    def scan(self) -> list[SessionMeta]:
        tmp_dir = self.root / "tmp"
        sessions: list[SessionMeta] = []

        try:
            project_dirs = list(tmp_dir.iterdir())
        except OSError:
            return []

        for project_dir in project_dirs:
            chats_dir = project_dir / "chats"
            try:
                chat_files = list(chats_dir.iterdir())
            except OSError:
                # Not a project directory, or unreadable
                continue

            for path in chat_files:
                if path.suffix != ".json" or not path.is_file():
                    continue
                meta = self._session_from_path(path)
                if meta:
                    sessions.append(meta)

        return sessions

    def _session_from_path(self, path: Path) -> SessionMeta | None:
        session_id = path.stem.removeprefix(SESSION_FILE_PREFIX)
        if not session_id:
            return None

        created_at, last_active_at = file_timestamps(path)

        return SessionMeta(
            provider_id=self.provider_id,
            session_id=session_id,
            created_at=created_at,
            last_active_at=last_active_at if last_active_at is not None else created_at,
            source_path=FileLocator(path),
            resume_command=f"gemini --resume {session_id}",
        )

    def load_messages(self, locator: FileLocator) -> list[SessionMessage]:
        """Parse a whole Gemini session document.

        There is no line-level granularity to recover at, so an unreadable
        file or a document without a messages array is an error.
        """
        path = locator.path
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise SessionLoadError(f"Failed to read session {path}: {e}") from e
        except (ValueError, RecursionError) as e:
            raise SessionLoadError(f"Failed to parse session JSON {path}: {e}") from e

        raw_messages = data.get("messages") if isinstance(data, dict) else None
        if not isinstance(raw_messages, list):
            raise SessionLoadError(f"No messages array found in {path}")

        messages: list[SessionMessage] = []
        for msg_data in raw_messages:
            if not isinstance(msg_data, dict):
                continue

            msg_type = msg_data.get("type")
            if not isinstance(msg_type, str):
                continue
            role = ROLE_MAPPING.get(msg_type, msg_type)

            text = extract_text(msg_data.get("content")).strip()
            if not text:
                continue

            messages.append(
                SessionMessage(
                    role=role,
                    content=text,
                    ts=parse_timestamp_ms(msg_data.get("timestamp")),
                )
            )

        logger.debug("Loaded %d messages from %s", len(messages), path)
        return messages

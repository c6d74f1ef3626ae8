"""Provider for OpenCode (SST) conversation transcripts.

OpenCode stores conversations in a hierarchical structure at:
    $XDG_DATA_HOME/opencode/storage/  (default ~/.local/share/opencode/storage/)

Directory layout:
    session/<projectHash>/ses_<id>.json    - Session metadata
    message/<sessionID>/msg_<id>.json      - Message metadata
    part/<messageID>/prt_<id>.json         - Content parts

Session file contains:
- id: Session identifier (e.g., "ses_419ccecd4ffe0HogypcacqYZnm")
- directory: Working directory path
- title: Display title
- time.created / time.updated: Timestamps (milliseconds)

Message file contains:
- id: Message identifier (e.g., "msg_be6331331001IbdWP1cz6buxkc")
- role: "user" or "assistant"
- time.created: Creation timestamp (milliseconds)

Part files carry the content; only {type: "text", text: string} parts count
as message text. Tool, reasoning, file and step parts are ignored.

Unlike the other providers, a session's locator is a directory
(message/<sessionID>/), not a file.
"""

from pathlib import Path

from session_lens.logging import get_logger
from session_lens.models import DirectoryLocator, SessionMessage, SessionMeta
from session_lens.providers.base import Provider, SessionLoadError
from session_lens.providers.utils import collect_files, parse_timestamp_ms, path_basename, read_json

logger = get_logger("providers.opencode")


def _time_field(data: dict, name: str) -> int | None:
    time_data = data.get("time")
    if not isinstance(time_data, dict):
        return None
    return parse_timestamp_ms(time_data.get(name))


class OpenCodeProvider(Provider):
    """Provider for OpenCode split session storage.

    The root is the storage directory itself, which holds the session,
    message and part trees.
    """

    provider_id = "opencode"
    locator_kind = DirectoryLocator

    def scan(self) -> list[SessionMeta]:
        sessions: list[SessionMeta] = []

        for path in collect_files(self.root / "session", "json"):
            meta = self._parse_session_file(path)
            if meta:
                sessions.append(meta)

        return sessions

    def _parse_session_file(self, path: Path) -> SessionMeta | None:
        """Read one session file's top-level fields; messages are not touched."""
        data = read_json(path)
        if not isinstance(data, dict):
            return None

        session_id = data.get("id")
        if not isinstance(session_id, str) or not session_id:
            return None

        title = data.get("title")
        if not isinstance(title, str) or not title:
            title = None
        directory = data.get("directory")
        if not isinstance(directory, str):
            directory = None

        created_at = _time_field(data, "created")
        updated_at = _time_field(data, "updated")

        return SessionMeta(
            provider_id=self.provider_id,
            session_id=session_id,
            title=title or path_basename(directory),
            project_dir=directory,
            created_at=created_at,
            last_active_at=updated_at if updated_at is not None else created_at,
            source_path=DirectoryLocator(self.root / "message" / session_id),
            resume_command=f"opencode session resume {session_id}",
        )

    def load_messages(self, locator: DirectoryLocator) -> list[SessionMessage]:
        """Rebuild a session's messages from its message and part files.

        Args:
            locator: The session's message/<sessionID>/ directory

        Returns:
            Messages sorted by creation time

        Raises:
            SessionLoadError: If the message directory does not exist
        """
        message_dir = locator.path
        if not message_dir.is_dir():
            raise SessionLoadError(f"Message directory not found: {message_dir}")

        # message/<sessionID>/ -> storage root
        storage_root = message_dir.parent.parent

        entries: list[tuple[int, SessionMessage]] = []
        for msg_path in collect_files(message_dir, "json"):
            msg_data = read_json(msg_path)
            if not isinstance(msg_data, dict):
                continue

            message_id = msg_data.get("id")
            if not isinstance(message_id, str) or not message_id:
                continue

            role = msg_data.get("role")
            if not isinstance(role, str):
                role = "unknown"

            text = self._collect_parts_text(storage_root / "part" / message_id)
            if not text:
                continue

            created = _time_field(msg_data, "created") or 0
            entries.append(
                (
                    created,
                    SessionMessage(role=role, content=text, ts=created if created > 0 else None),
                )
            )

        # Directory enumeration order is not chronological
        entries.sort(key=lambda entry: entry[0])

        logger.debug("Loaded %d messages from %s", len(entries), message_dir)
        return [message for _, message in entries]

    def _collect_parts_text(self, part_dir: Path) -> str:
        """Join the text parts of one message, in part file order."""
        texts: list[str] = []

        for part_path in sorted(collect_files(part_dir, "json")):
            part_data = read_json(part_path)
            if not isinstance(part_data, dict) or part_data.get("type") != "text":
                continue

            text = part_data.get("text")
            if isinstance(text, str) and text.strip():
                texts.append(text)

        return "\n".join(texts).strip()

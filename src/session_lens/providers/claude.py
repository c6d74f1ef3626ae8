"""Provider for Claude Code conversation transcripts.

Claude Code stores conversations as JSONL files at:
    ~/.claude/projects/<encoded-project-path>/<session-id>.jsonl

The project directory name is the absolute project path with every path
separator replaced by a hyphen, e.g. /Users/sam/Documents/myproject becomes
-Users-sam-Documents-myproject. Sub-agent transcripts live next to the
sessions as agent-<id>.jsonl and are not top-level sessions.

Each line is a JSON object with:
- type: "user", "assistant", "summary", "queue-operation", ...
- isMeta: true for injected bookkeeping messages
- message.role: "user" or "assistant"
- message.content: string or array of content blocks (text, tool_use, tool_result)
- timestamp: ISO 8601 timestamp
"""

from pathlib import Path

from session_lens.models import FileLocator, SessionMessage, SessionMeta
from session_lens.providers.base import Provider
from session_lens.providers.utils import (
    collect_files,
    extract_text,
    file_timestamps,
    iter_jsonl,
    parse_timestamp_ms,
    path_basename,
)

AGENT_SESSION_PREFIX = "agent-"


def decode_project_dir(encoded: str) -> str:
    """Decode a Claude project directory name back into a path.

    "-Users-sam-Documents-myproject" -> "/Users/sam/Documents/myproject"

    The encoding is lossy: a hyphen that was part of a path segment decodes
    to a separator just like one that stood for a separator.
    """
    if encoded.startswith("-"):
        return "/" + encoded[1:].replace("-", "/")
    return encoded.replace("-", "/")


class ClaudeProvider(Provider):
    """Provider for Claude Code JSONL transcript files."""

    provider_id = "claude"

    def scan(self) -> list[SessionMeta]:
        sessions: list[SessionMeta] = []

        for path in collect_files(self.root / "projects", "jsonl"):
            meta = self._session_from_path(path)
            if meta:
                sessions.append(meta)

        return sessions

    def _session_from_path(self, path: Path) -> SessionMeta | None:
        """Derive session metadata from the file path and stat info only."""
        if path.name.startswith(AGENT_SESSION_PREFIX):
            return None

        session_id = path.stem
        if not session_id:
            return None

        project_dir = decode_project_dir(path.parent.name) if path.parent.name else None
        created_at, last_active_at = file_timestamps(path)

        return SessionMeta(
            provider_id=self.provider_id,
            session_id=session_id,
            title=path_basename(project_dir),
            project_dir=project_dir,
            created_at=created_at,
            last_active_at=last_active_at,
            source_path=FileLocator(path),
            resume_command=f"claude --resume {session_id}",
        )

    def load_messages(self, locator: FileLocator) -> list[SessionMessage]:
        """Parse a Claude Code JSONL file into normalized messages.

        Tool results arrive as user turns made only of tool_result blocks;
        those become role "tool", named after the tool_use block with the
        matching id. Only tool_use blocks seen earlier in the file can be
        resolved.
        """
        messages: list[SessionMessage] = []
        tool_names: dict[str, str] = {}

        for entry in iter_jsonl(locator.path):
            if entry.get("isMeta") is True:
                continue

            message = entry.get("message")
            if not isinstance(message, dict):
                continue

            role = message.get("role")
            if not isinstance(role, str):
                role = "unknown"
            content = message.get("content")

            if role == "assistant":
                self._record_tool_uses(content, tool_names)

            tool_name = None
            if role == "user" and self._is_tool_result_only(content):
                role = "tool"
                tool_use_id = content[0].get("tool_use_id")
                if isinstance(tool_use_id, str):
                    tool_name = tool_names.get(tool_use_id)

            text = extract_text(content).strip()
            if not text:
                continue

            messages.append(
                SessionMessage(
                    role=role,
                    content=text,
                    ts=parse_timestamp_ms(entry.get("timestamp")),
                    tool_name=tool_name,
                )
            )

        return messages

    def _record_tool_uses(self, content: object, tool_names: dict[str, str]) -> None:
        if not isinstance(content, list):
            return
        for block in content:
            if not isinstance(block, dict) or block.get("type") != "tool_use":
                continue
            tool_id = block.get("id")
            name = block.get("name")
            if isinstance(tool_id, str) and isinstance(name, str):
                tool_names[tool_id] = name

    def _is_tool_result_only(self, content: object) -> bool:
        return (
            isinstance(content, list)
            and len(content) > 0
            and all(
                isinstance(block, dict) and block.get("type") == "tool_result"
                for block in content
            )
        )

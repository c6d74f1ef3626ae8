"""Canonical data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileLocator:
    """Session locator pointing at a single transcript file."""

    path: Path

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class DirectoryLocator:
    """Session locator pointing at a directory of per-message files."""

    path: Path

    def __str__(self) -> str:
        return str(self.path)


Locator = FileLocator | DirectoryLocator


@dataclass
class SessionMeta:
    """Identity and summary of one discovered session."""

    provider_id: str  # claude, codex, gemini, openclaw, opencode
    session_id: str  # Unique within provider_id only
    title: str | None = None
    summary: str | None = None
    project_dir: str | None = None
    created_at: int | None = None  # Epoch milliseconds
    last_active_at: int | None = None  # Epoch milliseconds
    source_path: Locator | None = None
    resume_command: str | None = None

    @property
    def key(self) -> str:
        """Globally unique key for this session."""
        return f"{self.provider_id}:{self.session_id}"

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dict."""
        return {
            "providerId": self.provider_id,
            "sessionId": self.session_id,
            "title": self.title,
            "summary": self.summary,
            "projectDir": self.project_dir,
            "createdAt": self.created_at,
            "lastActiveAt": self.last_active_at,
            "sourcePath": str(self.source_path) if self.source_path is not None else None,
            "resumeCommand": self.resume_command,
        }


@dataclass
class SessionMessage:
    """One normalized conversation turn."""

    role: str  # user, assistant, tool, or the provider's own role
    content: str
    ts: int | None = None  # Epoch milliseconds
    tool_name: str | None = None

    def to_dict(self) -> dict:
        """Convert to a JSON-ready dict."""
        return {
            "role": self.role,
            "content": self.content,
            "ts": self.ts,
            "toolName": self.tool_name,
        }

"""Tests for the Codex provider."""

import json
from pathlib import Path

import pytest

from session_lens.models import FileLocator
from session_lens.providers import CodexProvider, ProviderRegistry, SessionLoadError
from session_lens.providers.codex import extract_session_id

ROLLOUT_NAME = "rollout-2026-01-22T10-52-33-019be668-4c23-7792-8b9c-7995e5bfdeee.jsonl"


def write_jsonl(path: Path, lines: list[dict | str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        for line in lines:
            f.write(line if isinstance(line, str) else json.dumps(line))
            f.write("\n")
    return path


@pytest.fixture
def provider(tmp_path: Path) -> CodexProvider:
    return CodexProvider(root=tmp_path / ".codex")


@pytest.fixture
def day_dir(tmp_path: Path) -> Path:
    return tmp_path / ".codex" / "sessions" / "2026" / "01" / "22"


@pytest.fixture
def sample_rollout(day_dir: Path) -> Path:
    """Create a sample Codex rollout file."""
    return write_jsonl(
        day_dir / ROLLOUT_NAME,
        [
            {
                "timestamp": "2026-01-22T15:52:33.575Z",
                "type": "session_meta",
                "payload": {"id": "019be668-4c23-7792-8b9c-7995e5bfdeee", "cwd": "/home/user/app"},
            },
            {
                "timestamp": "2026-01-22T15:52:34.000Z",
                "type": "response_item",
                "payload": {
                    "type": "message",
                    "role": "user",
                    "content": [{"type": "input_text", "text": "Fix the failing test"}],
                },
            },
            {
                "timestamp": "2026-01-22T15:52:35.000Z",
                "type": "event_msg",
                "payload": {"type": "agent_message", "message": "Working on it"},
            },
            {
                "timestamp": "2026-01-22T15:52:36.000Z",
                "type": "response_item",
                "payload": {
                    "type": "function_call",
                    "name": "shell",
                    "arguments": "{\"command\": [\"pytest\"]}",
                },
            },
            {
                "timestamp": "2026-01-22T15:52:40.000Z",
                "type": "response_item",
                "payload": {
                    "type": "message",
                    "role": "assistant",
                    "content": [{"type": "output_text", "text": "The test passes now."}],
                },
            },
        ],
    )


class TestExtractSessionId:
    """Tests for extract_session_id."""

    def test_uuid_inside_name(self) -> None:
        name = "rollout-a1b2c3d4-e5f6-7890-abcd-ef1234567890-x.jsonl"
        assert extract_session_id(name) == "a1b2c3d4-e5f6-7890-abcd-ef1234567890"

    def test_uuid_after_timestamp(self) -> None:
        assert extract_session_id(ROLLOUT_NAME) == "019be668-4c23-7792-8b9c-7995e5bfdeee"

    def test_no_uuid(self) -> None:
        assert extract_session_id("rollout-2026-01-22.jsonl") is None


class TestCodexProviderBasics:
    """Tests for basic provider functionality."""

    def test_provider_id(self, provider: CodexProvider) -> None:
        assert provider.provider_id == "codex"

    def test_registered_in_registry(self) -> None:
        assert ProviderRegistry.get("codex") is CodexProvider

    def test_default_root_honors_codex_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODEX_HOME", str(tmp_path / "codex-home"))
        assert CodexProvider().root == tmp_path / "codex-home"


class TestCodexProviderScan:
    """Tests for scan."""

    def test_missing_root_returns_empty(self, tmp_path: Path) -> None:
        assert CodexProvider(root=tmp_path / "nope").scan() == []

    def test_discovers_session(self, provider: CodexProvider, sample_rollout: Path) -> None:
        sessions = provider.scan()

        assert len(sessions) == 1
        meta = sessions[0]
        assert meta.provider_id == "codex"
        assert meta.session_id == "019be668-4c23-7792-8b9c-7995e5bfdeee"
        assert meta.title is None
        assert meta.project_dir is None
        assert meta.source_path == FileLocator(sample_rollout)
        assert meta.resume_command == "codex resume 019be668-4c23-7792-8b9c-7995e5bfdeee"

    def test_files_without_uuid_are_skipped(self, provider: CodexProvider, day_dir: Path) -> None:
        write_jsonl(day_dir / "rollout-no-id.jsonl", [])
        assert provider.scan() == []

    def test_any_depth_under_sessions(self, provider: CodexProvider, tmp_path: Path) -> None:
        sessions_dir = tmp_path / ".codex" / "sessions"
        write_jsonl(sessions_dir / "a1b2c3d4-e5f6-7890-abcd-ef1234567890.jsonl", [])
        write_jsonl(sessions_dir / "x" / "rollout-11111111-2222-3333-4444-555555555555.jsonl", [])

        ids = sorted(m.session_id for m in provider.scan())

        assert ids == [
            "11111111-2222-3333-4444-555555555555",
            "a1b2c3d4-e5f6-7890-abcd-ef1234567890",
        ]


class TestCodexProviderLoadMessages:
    """Tests for load_messages."""

    def test_only_response_item_messages(self, provider: CodexProvider, sample_rollout: Path) -> None:
        messages = provider.load_messages(FileLocator(sample_rollout))

        assert [(m.role, m.content) for m in messages] == [
            ("user", "Fix the failing test"),
            ("assistant", "The test passes now."),
        ]
        assert all(m.tool_name is None for m in messages)

    def test_timestamps(self, provider: CodexProvider, sample_rollout: Path) -> None:
        messages = provider.load_messages(FileLocator(sample_rollout))
        assert messages[1].ts - messages[0].ts == 6000

    def test_roles_pass_through(self, provider: CodexProvider, day_dir: Path) -> None:
        path = write_jsonl(
            day_dir / ROLLOUT_NAME,
            [
                {
                    "type": "response_item",
                    "payload": {
                        "type": "message",
                        "role": "developer",
                        "content": [{"type": "input_text", "text": "<permissions>"}],
                    },
                },
            ],
        )

        messages = provider.load_messages(FileLocator(path))

        assert messages[0].role == "developer"

    def test_skips_malformed_and_mismatched_entries(self, provider: CodexProvider, day_dir: Path) -> None:
        path = write_jsonl(
            day_dir / ROLLOUT_NAME,
            [
                "{broken",
                {"type": "response_item"},
                {"type": "response_item", "payload": "nope"},
                {"type": "response_item", "payload": {"type": "message", "role": "user", "content": ""}},
                {"type": "response_item", "payload": {"type": "message", "role": "user", "content": "ok"}},
            ],
        )

        messages = provider.load_messages(FileLocator(path))

        assert [m.content for m in messages] == ["ok"]

    def test_missing_file_raises(self, provider: CodexProvider, tmp_path: Path) -> None:
        with pytest.raises(SessionLoadError):
            provider.load_messages(FileLocator(tmp_path / "missing.jsonl"))

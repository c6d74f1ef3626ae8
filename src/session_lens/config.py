"""Configuration loading and provider root resolution."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

PROVIDER_IDS = ("claude", "codex", "gemini", "openclaw", "opencode")


@dataclass
class ProviderConfig:
    enabled: bool = True
    root: Path | None = None


@dataclass
class Config:
    store_db: Path = field(default_factory=lambda: Path.home() / ".session-lens" / "sessions.db")
    log_dir: Path = field(default_factory=lambda: Path.home() / ".session-lens" / "logs")
    providers: dict[str, ProviderConfig] = field(default_factory=dict)

    def provider(self, provider_id: str) -> ProviderConfig:
        """Get the settings for a provider, falling back to defaults."""
        return self.providers.get(provider_id, ProviderConfig())


def expand_path(path_str: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expandvars(os.path.expanduser(path_str)))


def _env_dir(name: str) -> Path | None:
    value = os.environ.get(name, "")
    if not value:
        return None
    return expand_path(value)


def default_provider_root(provider_id: str) -> Path:
    """Return the on-disk root a tool uses when nothing is configured.

    Args:
        provider_id: One of PROVIDER_IDS

    Returns:
        Root directory for that tool's session storage

    Raises:
        ValueError: If provider_id is not known
    """
    home = Path.home()

    if provider_id == "claude":
        return _env_dir("CLAUDE_CONFIG_DIR") or home / ".claude"
    if provider_id == "codex":
        return _env_dir("CODEX_HOME") or home / ".codex"
    if provider_id == "gemini":
        return home / ".gemini"
    if provider_id == "openclaw":
        return home / ".openclaw"
    if provider_id == "opencode":
        xdg = _env_dir("XDG_DATA_HOME")
        if xdg is not None:
            return xdg / "opencode" / "storage"
        return home / ".local" / "share" / "opencode" / "storage"

    raise ValueError(f"Unknown provider: {provider_id}")


def resolve_provider_root(provider_id: str, config: Config | None = None) -> Path:
    """Resolve a provider's root, preferring an explicitly configured one."""
    if config is not None:
        root = config.provider(provider_id).root
        if root is not None:
            return root
    return default_provider_root(provider_id)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file."""
    if config_path is None:
        # Look for config in standard locations
        search_paths = [
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "session-lens" / "config.yaml",
            Path("/etc/session-lens/config.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None or not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    providers = {}
    for name, provider_data in (data.get("providers") or {}).items():
        provider_data = provider_data or {}
        root = provider_data.get("root")
        providers[name] = ProviderConfig(
            enabled=provider_data.get("enabled", True),
            root=expand_path(root) if root else None,
        )

    return Config(
        store_db=expand_path(data.get("store_db", "~/.session-lens/sessions.db")),
        log_dir=expand_path(data.get("log_dir", "~/.session-lens/logs")),
        providers=providers,
    )

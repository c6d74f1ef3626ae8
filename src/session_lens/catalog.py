"""Session discovery and loading across every registered provider."""

from collections.abc import Iterable
from pathlib import Path

from session_lens.config import Config
from session_lens.logging import get_logger
from session_lens.models import Locator, SessionMessage, SessionMeta
from session_lens.providers import Provider, ProviderRegistry, SessionLoadError

logger = get_logger("catalog")


class SessionCatalog:
    """Aggregates scans of all providers and dispatches message loading.

    Nothing is cached: every call reads the filesystem afresh.
    """

    def __init__(
        self,
        providers: Iterable[Provider] | None = None,
        config: Config | None = None,
    ) -> None:
        """Initialize the catalog.

        Args:
            providers: Provider instances to use. Defaults to one instance of
                       every registered provider enabled in config.
            config: Configuration for provider roots and enablement
        """
        if providers is None:
            providers = build_providers(config)
        self._providers: dict[str, Provider] = {p.provider_id: p for p in providers}

    @property
    def provider_ids(self) -> list[str]:
        return list(self._providers.keys())

    def provider(self, provider_id: str) -> Provider:
        """Get the provider for an id.

        Raises:
            SessionLoadError: If no such provider is registered
        """
        provider = self._providers.get(provider_id)
        if provider is None:
            raise SessionLoadError(f"Unknown provider: {provider_id}")
        return provider

    def scan_all(self) -> list[SessionMeta]:
        """Scan every provider and concatenate the results.

        Never raises; a provider whose root is missing contributes nothing.
        """
        sessions: list[SessionMeta] = []
        counts: dict[str, int] = {}

        for provider_id, provider in self._providers.items():
            try:
                found = provider.scan()
            except (OSError, ValueError, RecursionError) as e:
                logger.warning("Scan failed for provider=%s root=%s: %s", provider_id, provider.root, e)
                found = []
            counts[provider_id] = len(found)
            sessions.extend(found)

        logger.debug(
            "Scanned sessions: %s total=%d",
            " ".join(f"{pid}={count}" for pid, count in counts.items()),
            len(sessions),
        )
        return sessions

    def load_messages(self, provider_id: str, locator: Locator | str | Path) -> list[SessionMessage]:
        """Load one session's messages through its provider.

        Args:
            provider_id: Provider that produced the session
            locator: The session's source_path, either a typed locator or
                     a raw path string

        Raises:
            SessionLoadError: Unknown provider, wrong locator kind, or an
                              unrecoverable failure reading the session
        """
        provider = self.provider(provider_id)

        if isinstance(locator, (str, Path)):
            locator = provider.make_locator(locator)
        elif not isinstance(locator, provider.locator_kind):
            raise SessionLoadError(
                f"Provider {provider_id} expects a {provider.locator_kind.__name__}, "
                f"got {type(locator).__name__}"
            )

        messages = provider.load_messages(locator)
        logger.debug("Loaded %d messages provider=%s path=%s", len(messages), provider_id, locator)
        return messages


def build_providers(config: Config | None = None) -> list[Provider]:
    """Instantiate every registered provider that is enabled in config."""
    providers: list[Provider] = []
    for provider_cls in ProviderRegistry.all():
        if config is not None and not config.provider(provider_cls.provider_id).enabled:
            continue
        providers.append(provider_cls(config=config))
    return providers


def sort_sessions(sessions: list[SessionMeta]) -> list[SessionMeta]:
    """Sort sessions most recently active first; undated sessions last."""

    def sort_key(meta: SessionMeta) -> tuple[bool, int]:
        ts = meta.last_active_at if meta.last_active_at is not None else meta.created_at
        return (ts is None, -(ts or 0))

    return sorted(sessions, key=sort_key)


def filter_sessions(
    sessions: list[SessionMeta],
    provider_id: str | None = None,
    query: str | None = None,
    aliases: dict[str, str] | None = None,
    only_aliased: bool = False,
) -> list[SessionMeta]:
    """Filter sessions by provider, free-text query and alias presence.

    The query is matched case-insensitively against the alias, title,
    project directory and session id.
    """
    aliases = aliases or {}
    needle = query.strip().lower() if query else ""
    results: list[SessionMeta] = []

    for meta in sessions:
        if provider_id and meta.provider_id != provider_id:
            continue

        alias = aliases.get(meta.key)
        if only_aliased and not alias:
            continue

        if needle:
            haystack = [alias, meta.title, meta.project_dir, meta.session_id]
            if not any(needle in value.lower() for value in haystack if value):
                continue

        results.append(meta)

    return results


def find_session(sessions: Iterable[SessionMeta], provider_id: str, session_id: str) -> SessionMeta | None:
    """Find a session by its (provider_id, session_id) identity."""
    for meta in sessions:
        if meta.provider_id == provider_id and meta.session_id == session_id:
            return meta
    return None


def build_resume_command(meta: SessionMeta, extra_args: str | None = None) -> str | None:
    """Build the shell command that resumes a session in its own tool.

    Args:
        meta: The session
        extra_args: Extra arguments appended verbatim

    Returns:
        The command, or None if the tool has no resume command
    """
    if not meta.resume_command:
        return None

    parts = [meta.resume_command]
    if extra_args and extra_args.strip():
        parts.append(extra_args.strip())
    return " ".join(parts)

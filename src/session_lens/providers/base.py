"""Base provider interface and registry."""

from abc import ABC, abstractmethod
from pathlib import Path

from session_lens.config import Config, resolve_provider_root
from session_lens.models import DirectoryLocator, FileLocator, Locator, SessionMessage, SessionMeta

__all__ = ["Provider", "ProviderRegistry", "SessionLoadError"]


class SessionLoadError(Exception):
    """A session could not be loaded at all.

    Raised only for top-level failures: a missing session file or directory,
    a malformed whole-document session, an unknown provider, or a locator of
    the wrong kind. Per-line and per-file problems are skipped instead.
    """


class Provider(ABC):
    """Base class for session providers.

    Subclasses must set the `provider_id` class attribute and implement
    `scan()` and `load_messages()`. `scan()` must stay cheap (file metadata,
    at most one shallow parse per session); `load_messages()` does the full
    parse of one session on demand.
    """

    provider_id: str
    locator_kind: type[FileLocator] | type[DirectoryLocator] = FileLocator

    def __init__(self, root: Path | None = None, config: Config | None = None) -> None:
        """Initialize the provider.

        Args:
            root: Tool root directory. Defaults to the configured root or the
                  tool's own default location.
            config: Optional configuration used to resolve the root
        """
        if root is None:
            root = resolve_provider_root(self.provider_id, config)
        self.root = root

    @abstractmethod
    def scan(self) -> list[SessionMeta]:
        """Discover sessions without reading their message bodies."""

    @abstractmethod
    def load_messages(self, locator: Locator) -> list[SessionMessage]:
        """Load the normalized messages of one session.

        Raises:
            SessionLoadError: On unrecoverable top-level failures
        """

    def make_locator(self, source_path: str | Path) -> Locator:
        """Wrap a raw path in this provider's locator kind."""
        return self.locator_kind(Path(source_path))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(root={str(self.root)!r})"


class ProviderRegistry:
    """Registry of provider classes by provider id."""

    _providers: dict[str, type[Provider]] = {}

    @classmethod
    def register(cls, provider_cls: type[Provider]) -> None:
        """Register a provider class."""
        cls._providers[provider_cls.provider_id] = provider_cls

    @classmethod
    def get(cls, provider_id: str) -> type[Provider] | None:
        """Get provider class by id."""
        return cls._providers.get(provider_id)

    @classmethod
    def all_ids(cls) -> list[str]:
        """List all registered provider ids."""
        return list(cls._providers.keys())

    @classmethod
    def all(cls) -> list[type[Provider]]:
        """List all registered provider classes."""
        return list(cls._providers.values())

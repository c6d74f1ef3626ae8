"""Providers for the on-disk session formats of different AI coding tools."""

from .base import Provider, ProviderRegistry, SessionLoadError
from .claude import ClaudeProvider
from .codex import CodexProvider
from .gemini import GeminiProvider
from .openclaw import OpenClawProvider
from .opencode import OpenCodeProvider

__all__ = [
    "ClaudeProvider",
    "CodexProvider",
    "GeminiProvider",
    "OpenClawProvider",
    "OpenCodeProvider",
    "Provider",
    "ProviderRegistry",
    "SessionLoadError",
]

# Register providers
ProviderRegistry.register(ClaudeProvider)
ProviderRegistry.register(CodexProvider)
ProviderRegistry.register(GeminiProvider)
ProviderRegistry.register(OpenClawProvider)
ProviderRegistry.register(OpenCodeProvider)

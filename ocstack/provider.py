"""Selection of the model provider that answers chat requests."""

from __future__ import annotations

from ocstack.llamacpp import LlamaCppProvider
from ocstack.ollama import OllamaProvider

OLLAMA_PROVIDER = "ollama"
LLAMACPP = "llama"


def get_provider(provider_id: str) -> OllamaProvider | LlamaCppProvider | None:
    """Return a client for the named provider, or None if the name is unknown."""
    if provider_id == OLLAMA_PROVIDER:
        return OllamaProvider.from_environment()
    if provider_id == LLAMACPP:
        return LlamaCppProvider.from_environment()
    return None
"""Runtime configuration for the summarization provider."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from nosy.errors import ConfigurationError

DEFAULT_PROVIDER = "openrouter"
DEFAULT_MODEL = "anthropic/claude-sonnet-4.5"
BASE_URL_ENV = "NOSY_LLM_BASE_URL"
MODEL_ENV = "NOSY_LLM_MODEL"


@dataclass(frozen=True, slots=True)
class ProviderProfile:
    """Endpoint and credential source for one OpenAI-compatible provider."""

    name: str
    base_url: str
    api_key_env: str | None


PROVIDERS: dict[str, ProviderProfile] = {
    "openrouter": ProviderProfile("openrouter", "https://openrouter.ai/api/v1", "OPENROUTER_API_KEY"),
    "openai": ProviderProfile("openai", "https://api.openai.com/v1", "OPENAI_API_KEY"),
    "github-copilot": ProviderProfile(
        "github-copilot",
        "https://models.inference.ai.azure.com",
        "GITHUB_COPILOT_API_KEY",
    ),
    "ollama": ProviderProfile("ollama", "http://localhost:11434/v1", None),
}


@dataclass(frozen=True, slots=True)
class LLMSettings:
    """Validated provider settings used by the summarizer."""

    provider: str
    api_key: str
    model: str
    base_url: str

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        provider: str = DEFAULT_PROVIDER,
        model: str | None = None,
    ) -> "LLMSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        profile = PROVIDERS.get(provider)
        if profile is None:
            choices = ", ".join(sorted(PROVIDERS))
            raise ConfigurationError(f"Unknown LLM provider {provider!r} (choose from {choices})")

        if profile.api_key_env is None:
            # local servers ignore the key, but the SDK requires one
            api_key = profile.name
        else:
            api_key = source.get(profile.api_key_env, "").strip()
            if not api_key:
                raise ConfigurationError(f"Missing required LLM environment variable: {profile.api_key_env}")

        resolved_model = (model or source.get(MODEL_ENV, "") or DEFAULT_MODEL).strip()
        if not resolved_model:
            raise ConfigurationError("LLM model cannot be empty")

        base_url = source.get(BASE_URL_ENV, profile.base_url).strip()
        if not base_url:
            raise ConfigurationError(f"{BASE_URL_ENV} cannot be empty")
        if not (base_url.startswith("http://") or base_url.startswith("https://")):
            raise ConfigurationError(f"{BASE_URL_ENV} must start with http:// or https://")

        return cls(
            provider=profile.name,
            api_key=api_key,
            model=resolved_model,
            base_url=base_url.rstrip("/"),
        )

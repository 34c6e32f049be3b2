"""Provider name to codex CLI environment mapping."""

import os
import re

from ..models.schemas import ProviderEnvironment


# provider -> (api key variable, base url variable)
PROVIDERS: dict[str, tuple[str, str]] = {
    "openai": ("OPENAI_API_KEY", "OPENAI_BASE_URL"),
    "openrouter": ("OPENROUTER_API_KEY", "OPENROUTER_BASE_URL"),
    "gemini": ("GEMINI_API_KEY", "GEMINI_BASE_URL"),
    "ollama": ("OLLAMA_API_KEY", "OLLAMA_BASE_URL"),
    "mistral": ("MISTRAL_API_KEY", "MISTRAL_BASE_URL"),
    "deepseek": ("DEEPSEEK_API_KEY", "DEEPSEEK_BASE_URL"),
    "xai": ("XAI_API_KEY", "XAI_BASE_URL"),
    "groq": ("GROQ_API_KEY", "GROQ_BASE_URL"),
    "custom": ("CUSTOM_API_KEY", "CUSTOM_BASE_URL"),
}


def _env_prefix(provider: str) -> str:
    """Derive an environment variable prefix from a provider name."""
    prefix = re.sub(r"[^A-Za-z0-9]+", "_", provider.strip()).strip("_").upper()
    return prefix or "PROVIDER"


def get_provider_vars(provider: str) -> tuple[str, str]:
    """
    Get the (api key, base url) variable names for a provider.

    Unknown providers follow the <PROVIDER>_API_KEY / <PROVIDER>_BASE_URL convention.
    """
    name = provider.strip().lower()
    if name in PROVIDERS:
        return PROVIDERS[name]
    prefix = _env_prefix(name)
    return f"{prefix}_API_KEY", f"{prefix}_BASE_URL"


def map_provider_environment(
    provider: str,
    api_key: str,
    base_url: str | None = None
) -> ProviderEnvironment:
    """
    Map a provider to the environment variables the codex CLI reads.

    The base URL variable is only set when a base URL is given. The key is
    passed through as-is; the CLI rejects bad credentials itself.
    """
    api_key_var, base_url_var = get_provider_vars(provider)

    env = {api_key_var: api_key}
    if base_url:
        env[base_url_var] = base_url

    return ProviderEnvironment(
        provider=provider.strip().lower(),
        api_key_var=api_key_var,
        base_url_var=base_url_var if base_url else None,
        env=env,
    )


def build_subprocess_env(
    provider_env: ProviderEnvironment,
    base: dict[str, str] | None = None
) -> dict[str, str]:
    """Build the full subprocess environment with the provider variables merged in."""
    env = dict(os.environ if base is None else base)

    if provider_env.base_url_var is None:
        # Do not let a runner-level base URL leak into a run that did not ask for one
        _, base_url_var = get_provider_vars(provider_env.provider)
        env.pop(base_url_var, None)

    env.update(provider_env.env)
    return env

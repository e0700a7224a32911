"""Provider/runtime configuration for the completion layer.

Architectural role:
    Centralizes endpoint selection, credential lookup, and model defaults for
    `figma2jsx.llm.client` and the conversion orchestrator.

Lifecycle:
    `.env` is loaded at import time. `load_config()` reads the process
    environment once and caches the resulting frozen `ProviderConfig`; callers
    receive it by injection and never read environment variables themselves.

Failure behavior:
    Missing key material is represented as `api_key=None`; the client turns it
    into an "unauthorized" service error instead of raising here.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

from figma2jsx.core.conversion_types import ModelSettings

load_dotenv()

# OpenAI-compatible chat-completions endpoints.
PROVIDERS = {

    "local": {
        "url": "http://127.0.0.1:8080/v1/chat/completions",
        "key_file": None
    },

    "openai": {
        "url": "https://api.openai.com/v1/chat/completions",
        "key_file": "config/openai.key"
    },

    "groq": {
        "url": "https://api.groq.com/openai/v1/chat/completions",
        "key_file": "config/groq.key"
    },

    "together": {
        "url": "https://api.together.xyz/v1/chat/completions",
        "key_file": "config/together.key"
    },

    "openrouter": {
        "url": "https://openrouter.ai/api/v1/chat/completions",
        "key_file": "config/openrouter.key"
    },

    "mistral": {
        "url": "https://api.mistral.ai/v1/chat/completions",
        "key_file": "config/mistral.key"
    },

    "deepinfra": {
        "url": "https://api.deepinfra.com/v1/openai/chat/completions",
        "key_file": "config/deepinfra.key"
    },

    "fireworks": {
        "url": "https://api.fireworks.ai/inference/v1/chat/completions",
        "key_file": "config/fireworks.key"
    },

}

DEFAULT_PROVIDER = "openai"
DEFAULT_MAX_IMAGE_SIZE_MB = 20


@dataclass(frozen=True)
class ProviderConfig:
    """Read-only configuration injected into the client and orchestrator.

    Attributes:
        provider: Key into `PROVIDERS`.
        completion_url: Chat-completions endpoint.
        api_key: Bearer credential, or `None` when not configured.
        requires_key: False for keyless local endpoints.
        request_timeout: Seconds for `requests`, or `None` for no limit.
        max_image_bytes: Upper bound for accepted image payloads.
        models: Per-modality model ids and generation limits.
        debug: Enables payload-shape diagnostics in logs.
    """

    provider: str
    completion_url: str
    api_key: str | None = field(default=None, repr=False)
    requires_key: bool = True
    request_timeout: float | None = None
    max_image_bytes: int = DEFAULT_MAX_IMAGE_SIZE_MB * 1024 * 1024
    models: ModelSettings = field(default_factory=ModelSettings)
    debug: bool = False


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/openai.key` -> `OPENAI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing or empty file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value.strip()
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


def build_config() -> ProviderConfig:
    """Build a `ProviderConfig` from the current process environment.

    Environment variables:
        PROVIDER: Provider key (default `openai`).
        COMPLETION_URL: Overrides the provider endpoint.
        <PROVIDER>_API_KEY or `config/<provider>.key`: credential.
        VISION_MODEL / TEXT_MODEL: Model ids.
        VISION_MAX_TOKENS / TEXT_MAX_TOKENS / TEXT_TEMPERATURE: Generation limits.
        REQUEST_TIMEOUT: Seconds; unset means no client-side timeout.
        MAX_IMAGE_SIZE_MB: Largest accepted image (default 20).
        DEBUG: `true` enables diagnostic logging.

    Raises:
        ValueError: Unknown provider or malformed numeric value.
    """
    provider = os.getenv("PROVIDER", DEFAULT_PROVIDER).strip().lower()
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}")

    provider_entry = PROVIDERS[provider]
    defaults = ModelSettings()

    models = ModelSettings(
        vision_model=os.getenv("VISION_MODEL", defaults.vision_model),
        text_model=os.getenv("TEXT_MODEL", defaults.text_model),
        vision_max_tokens=int(os.getenv("VISION_MAX_TOKENS", defaults.vision_max_tokens)),
        text_max_tokens=int(os.getenv("TEXT_MAX_TOKENS", defaults.text_max_tokens)),
        text_temperature=float(os.getenv("TEXT_TEMPERATURE", defaults.text_temperature)),
    )

    max_image_mb = float(os.getenv("MAX_IMAGE_SIZE_MB", DEFAULT_MAX_IMAGE_SIZE_MB))

    return ProviderConfig(
        provider=provider,
        completion_url=os.getenv("COMPLETION_URL", provider_entry["url"]),
        api_key=load_key(provider_entry["key_file"]),
        requires_key=provider_entry["key_file"] is not None,
        request_timeout=_optional_float("REQUEST_TIMEOUT"),
        max_image_bytes=int(max_image_mb * 1024 * 1024),
        models=models,
        debug=os.getenv("DEBUG") == "true",
    )


@lru_cache(maxsize=1)
def load_config() -> ProviderConfig:
    """Return the process-wide configuration, built on first use."""
    return build_config()

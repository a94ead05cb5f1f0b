"""LiteLLM client wrapper for the remote classifier and date resolver.

Both remote collaborators route through this module. Failures of any kind
(network, provider, empty or malformed output) surface as ``RemoteError`` so
callers can fall back without caring about provider exception types.
"""

from __future__ import annotations

import json
import os
import re
from typing import Any

import litellm

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure": "AZURE_API_KEY",
    "cohere": "COHERE_API_KEY",
    "google": "GOOGLE_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "groq": "GROQ_API_KEY",
    "together_ai": "TOGETHERAI_API_KEY",
    "ollama": None,  # Local, no key required
    "ollama_chat": None,
}

_JSON_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)


class RemoteError(Exception):
    """A remote collaborator call failed or returned unusable output."""


def provider_of(model: str) -> str:
    return model.split("/")[0].lower() if "/" in model else "openai"


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Raises:
        EnvironmentError: If the required key is missing from environment.
    """
    provider = provider_of(model)
    env_var = _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")

    if env_var is None:
        return

    if not os.getenv(env_var):
        raise EnvironmentError(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


def complete(
    model: str,
    messages: list[dict],
    max_tokens: int = 256,
    temperature: float = 0.0,
    num_retries: int = 1,
    timeout: float | None = None,
) -> str:
    """Call litellm.completion() and return the first choice's content.

    Raises:
        RemoteError: On any provider or transport failure.
    """
    try:
        response = litellm.completion(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            num_retries=num_retries,
            timeout=timeout,
        )
        return response.choices[0].message.content or ""
    except Exception as exc:
        raise RemoteError(f"{type(exc).__name__}: {exc}") from exc


def complete_json(
    model: str,
    messages: list[dict],
    **kwargs: Any,
) -> dict[str, Any]:
    """Like :func:`complete` but parse the reply as a JSON object.

    Models sometimes wrap JSON in prose or code fences; the first ``{...}``
    block is extracted before parsing.

    Raises:
        RemoteError: On call failure or if no JSON object can be parsed.
    """
    text = complete(model, messages, **kwargs).strip()
    if not text:
        raise RemoteError("empty response")
    match = _JSON_BLOCK_RE.search(text)
    if match is None:
        raise RemoteError(f"no JSON object in response: {text[:80]!r}")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise RemoteError(f"malformed JSON in response: {exc}") from exc
    if not isinstance(data, dict):
        raise RemoteError("response JSON is not an object")
    return data

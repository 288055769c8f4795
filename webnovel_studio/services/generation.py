"""Shared plumbing for every call to the completion gateway."""

from __future__ import annotations

from flask import current_app

from ..llm_client import ChatCompletionClient, GenerationError

CLIENT_CACHE_KEY = "_COMPLETION_CLIENT_INSTANCE"


def request_completion(system_prompt: str, user_prompt: str) -> str:
    """Issue exactly one completion call and return the generated text."""

    client = _get_completion_client()
    return client.complete(system_prompt, user_prompt)


def _get_completion_client() -> ChatCompletionClient:  # pragma: no cover - integration point
    app = current_app
    cached = app.config.get(CLIENT_CACHE_KEY)
    if cached is not None:
        return cached

    api_key = app.config.get("LLM_API_KEY")
    if not api_key:
        raise GenerationError("LLM_API_KEY is not configured")

    model_name = app.config.get("LLM_MODEL")
    app.logger.info("Initialising completion client for model: %s", model_name)
    client = ChatCompletionClient(
        model_name,
        api_key,
        base_url=app.config.get("LLM_API_BASE"),
        temperature=app.config.get("LLM_TEMPERATURE", 0.8),
    )
    app.config[CLIENT_CACHE_KEY] = client
    return client
